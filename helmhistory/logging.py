"""Structured logging configuration for helmhistory."""

import logging
import sys
from typing import Any, Dict, List, Optional

import structlog
from structlog.types import Processor

from .config import get_settings


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def setup_logging(level: Optional[str] = None, *, force: bool = False) -> None:
    """Configure structured logging for helmhistory.

    The root logger only gets a stderr handler when it has none yet.
    ``force`` replaces whatever handlers are already installed; only the
    CLI passes it.
    """
    settings = get_settings()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=(level or settings.log_level).upper(),
        force=force,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            _renderer(settings.log_format),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def log_helm_call(
    logger: structlog.stdlib.BoundLogger,
    cmd: List[str],
    returncode: Optional[int],
    duration_ms: int,
    **kwargs: Any,
) -> None:
    """Log a finished helm invocation."""
    log_data: Dict[str, Any] = {
        "helm_cmd": " ".join(cmd),
        "returncode": returncode,
        "duration_ms": duration_ms,
    }

    log_data.update(kwargs)

    logger.info("helm.call", **log_data)


def log_step_event(
    logger: structlog.stdlib.BoundLogger,
    release_name: str,
    phase: str,
    revision: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """Log a build step event with release context."""
    log_data: Dict[str, Any] = {
        "release_name": release_name,
        "phase": phase,
    }

    if revision is not None:
        log_data["revision"] = revision

    log_data.update(kwargs)

    logger.info(f"step.{phase}", **log_data)


# Initialize logging on module import
setup_logging()
