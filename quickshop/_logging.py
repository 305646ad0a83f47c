"""
Logging setup.

Library modules only call structlog.get_logger(__name__); the host
application decides the output by calling configure_logging() once.
"""

from __future__ import annotations

import logging

import structlog


def configure_logging(level: str | int = "INFO", json: bool = True) -> None:
    """
    Configure structlog for the engine.

    Example:
        configure_logging("DEBUG", json=False)
    """
    if isinstance(level, str):
        numeric = logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise ValueError(f"Unknown log level: {level}")
        level = numeric

    renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


__all__ = ("configure_logging",)
