"""structlog setup for the codebundle CLI."""

from __future__ import annotations

import logging
import sys

import structlog


def verbosity_to_level(verbosity: int) -> int:
    """Map `-q` (-1), default (0), `-v` (1) and `-vv` (2+) to a log level."""
    if verbosity < 0:
        return logging.ERROR
    if verbosity == 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(verbosity: int = 0) -> None:
    """
    Configure structlog to render key/value events on stderr, filtered by the
    level derived from `verbosity`.
    """
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(verbosity_to_level(verbosity)),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def _stderr_logger(*args: object) -> structlog.PrintLogger:
    # Looked up per call so a replaced `sys.stderr` is honored.
    return structlog.PrintLogger(file=sys.stderr)
