"""Logging configuration using structlog."""

import logging
import sys

import structlog

from runtime_insight.core.config import get_settings

EXPLANATION_LOGGER_NAME = "runtime_insight.explanations"


def _level(name: str) -> int:
    return getattr(logging, name)


def _renderer(log_record_format: str):
    if log_record_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging() -> None:
    """Configure structlog for the application."""
    settings = get_settings()

    log_level = _level(settings.app.log_level.value)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            _renderer(settings.observability.log_record_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_explanation_logger(level: str | None = None):
    """Logger for exception explanations.

    Explanations are emitted at debug, so this logger filters at
    ``RUNTIME_INSIGHT_LOG_LEVEL`` instead of the application level. It still
    renders through the processors installed by ``setup_logging``.
    """
    if level is None:
        level = get_settings().runtime_insight.log_level.value
    return structlog.wrap_logger(
        None,
        wrapper_class=structlog.make_filtering_bound_logger(_level(level)),
        logger_name=EXPLANATION_LOGGER_NAME,
    )
