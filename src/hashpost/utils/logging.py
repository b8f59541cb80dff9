"""Structured logging configuration for hashpost."""

import logging
import sys
from typing import Any

import structlog


def setup_logging(log_level: str = "INFO", json_logs: bool | None = None) -> None:
    """Configure structlog for processes that drive the publishing client.

    Args:
        log_level: Minimum level to emit (e.g. "DEBUG", "INFO").
        json_logs: Render JSON lines when True, a console layout when False.
            Defaults to JSON unless stdout is an interactive terminal.
    """
    level = getattr(logging, log_level.upper())
    if json_logs is None:
        json_logs = not sys.stdout.isatty()

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a structured logger bound to ``name``.

    Note: Returns Any because structlog hands back a lazy proxy whose concrete
    type depends on how setup_logging() configured it.
    """
    return structlog.get_logger(name)
