"""Unit tests for logging module."""

import logging
from unittest.mock import patch

import pytest
import structlog

from runtime_insight.core.logging import get_explanation_logger, setup_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


def _setup(log_level: str, log_record_format: str) -> None:
    with patch("runtime_insight.core.logging.get_settings") as mock_settings:
        mock_settings.return_value.app.log_level.value = log_level
        mock_settings.return_value.observability.log_record_format = log_record_format
        setup_logging()


def test_setup_logging_json():
    _setup("INFO", "json")

    config = structlog.get_config()
    assert isinstance(config["processors"][-1], structlog.processors.JSONRenderer)
    assert structlog.contextvars.merge_contextvars in config["processors"]
    assert config["wrapper_class"] is structlog.make_filtering_bound_logger(logging.INFO)


def test_setup_logging_console():
    _setup("DEBUG", "console")

    config = structlog.get_config()
    assert isinstance(config["processors"][-1], structlog.dev.ConsoleRenderer)
    assert config["wrapper_class"] is structlog.make_filtering_bound_logger(logging.DEBUG)


def test_explanation_logger_ignores_app_level():
    _setup("INFO", "json")

    with structlog.testing.capture_logs() as logs:
        structlog.get_logger("host").debug("host debug line")
        get_explanation_logger("DEBUG").debug("Runtime Insight Explanation", exception="ValueError")

    assert [entry["event"] for entry in logs] == ["Runtime Insight Explanation"]
    assert logs[0]["log_level"] == "debug"


def test_explanation_logger_can_be_silenced():
    _setup("DEBUG", "json")

    with structlog.testing.capture_logs() as logs:
        get_explanation_logger("INFO").debug("Runtime Insight Explanation")

    assert logs == []


def test_explanation_logger_defaults_to_configured_level(monkeypatch):
    monkeypatch.setenv("RUNTIME_INSIGHT_LOG_LEVEL", "warning")

    with structlog.testing.capture_logs() as logs:
        get_explanation_logger().debug("Runtime Insight Explanation")
        get_explanation_logger().warning("kept")

    assert [entry["event"] for entry in logs] == ["kept"]


def test_explanation_context_is_captured_by_structlog(mock_analyzer, raised_exception):
    from runtime_insight.integration.exception_subscriber import (
        EXPLANATION_LOG_EVENT,
        ExceptionSubscriber,
    )
    from runtime_insight.kernel.events import ExceptionEvent

    with structlog.testing.capture_logs() as logs:
        subscriber = ExceptionSubscriber(mock_analyzer, get_explanation_logger("DEBUG"))
        subscriber.on_kernel_exception(ExceptionEvent(exception=raised_exception))

    assert len(logs) == 1
    assert logs[0]["event"] == EXPLANATION_LOG_EVENT
    assert logs[0]["log_level"] == "debug"
    assert logs[0]["exception"] == "ValueError"
    assert logs[0]["explanation"]["cause"] == "Test cause"
