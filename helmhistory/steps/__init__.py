"""Build steps for helmhistory."""

from .history_step import (
    DISPLAY_NAME,
    FUNCTION_NAME,
    HelmHistoryStep,
    check_release_name,
    fill_revision_items,
)

__all__ = [
    "DISPLAY_NAME",
    "FUNCTION_NAME",
    "HelmHistoryStep",
    "check_release_name",
    "fill_revision_items",
]
