"""Observability: structlog configuration and in-process metrics."""

import logging

import structlog


def build_processors(render_console: bool) -> list:
    """Processor chain shared by every logger; only the final renderer varies."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.dev.ConsoleRenderer() if render_console else structlog.processors.JSONRenderer(),
    ]


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structlog for the service.

    DEBUG renders human-readable console lines; every other level emits one
    JSON object per event. Unknown level names fall back to INFO.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=build_processors(render_console=level == logging.DEBUG),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


from pdfchat.modules.observability.metrics import (
    track_latency,
    record_latency,
    record_generation,
    get_metrics_snapshot,
    reset_metrics,
)

__all__ = [
    "build_processors",
    "setup_logging",
    "track_latency",
    "record_latency",
    "record_generation",
    "get_metrics_snapshot",
    "reset_metrics",
]
