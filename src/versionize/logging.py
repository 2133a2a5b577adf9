"""Structured logging for versionize.

Log events go to stderr, either as console lines or (``--json-log``) as one
JSON object per line. Stdout is left to the CLI's own output.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import FilteringBoundLogger, Processor


def _level(*, verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.WARNING
    if verbose:
        return logging.DEBUG
    return logging.INFO


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    json_log: bool = False,
) -> None:
    """Configure structlog for the current process.

    ``quiet`` wins over ``verbose`` when both are set.
    """
    renderer: Processor
    if json_log:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level(verbose=verbose, quiet=quiet)),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str = "versionize") -> FilteringBoundLogger:
    """Return a logger that picks up the configuration current at call time."""
    return structlog.get_logger(name)


__all__ = [
    "configure_logging",
    "get_logger",
]
