"""Structured logging configuration.

Diagnostics go to stderr through structlog so stdout carries only the scan
report. The level comes from the CLI or VULNGATE_LOG_LEVEL (default: warning).
"""

from __future__ import annotations

import logging
import os
import sys

import structlog

LOG_LEVELS = ("debug", "info", "warning", "error")


def _stderr_logger(*args) -> structlog.PrintLogger:
    return structlog.PrintLogger(sys.stderr)


def setup_logging(level: str | None = None) -> None:
    """Configure structlog with a level filter and a console renderer.

    Args:
        level: One of debug, info, warning, error (default: VULNGATE_LOG_LEVEL or warning)
    """
    level_name = (level or os.environ.get("VULNGATE_LOG_LEVEL", "warning")).upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.WARNING

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )
