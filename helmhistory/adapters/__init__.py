"""Adapters for external systems integration."""

from .helm_adapter import HelmAdapter, parse_history_output

__all__ = [
    "HelmAdapter",
    "parse_history_output",
]
