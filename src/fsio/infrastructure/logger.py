"""Structured logging setup using structlog."""

from __future__ import annotations

import logging
import sys

import structlog

from fsio.infrastructure.config import SETTINGS


def setup_logging() -> structlog.typing.FilteringBoundLogger:
    """Configure structlog with console output."""
    log_level = SETTINGS.log_level.upper()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, log_level, logging.INFO)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger("fsio")


logger: structlog.typing.FilteringBoundLogger = setup_logging()
