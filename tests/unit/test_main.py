"""Unit tests for the demo host wiring."""

from unittest.mock import patch

from fastapi import FastAPI

from runtime_insight.core.config import AppConfig, ObservabilityConfig, ServerConfig, Settings
from runtime_insight.main import build_tracer_provider, run, setup_telemetry


def test_setup_telemetry_skipped_without_endpoint(monkeypatch):
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_ENDPOINT", raising=False)
    monkeypatch.delenv("OTEL_OTLP_ENDPOINT", raising=False)
    app = FastAPI()

    assert setup_telemetry(app, Settings()) is False
    assert getattr(app, "_is_instrumented_by_opentelemetry", False) is False


def test_tracer_provider_resource_describes_host():
    settings = Settings(
        app=AppConfig(env="staging", version="1.2.3"),
        observability=ObservabilityConfig(otlp_endpoint="http://collector:4317"),
    )

    provider = build_tracer_provider(settings)
    try:
        attributes = provider.resource.attributes
        assert attributes["service.name"] == "runtime-insight"
        assert attributes["service.version"] == "1.2.3"
        assert attributes["deployment.environment"] == "staging"
        assert attributes["runtime_insight.enabled"] is True
    finally:
        provider.shutdown()


def test_run_uses_single_reloading_worker_locally():
    settings = Settings(app=AppConfig(env="local"), server=ServerConfig(port=9001, workers=8))

    with (
        patch("runtime_insight.main.get_settings", return_value=settings),
        patch("uvicorn.run") as mock_run,
    ):
        run()

    _, kwargs = mock_run.call_args
    assert kwargs["factory"] is True
    assert kwargs["port"] == 9001
    assert kwargs["reload"] is True
    assert kwargs["workers"] == 1
    assert kwargs["log_level"] == "info"


def test_run_uses_configured_workers_outside_local():
    settings = Settings(app=AppConfig(env="staging"), server=ServerConfig(workers=8))

    with (
        patch("runtime_insight.main.get_settings", return_value=settings),
        patch("uvicorn.run") as mock_run,
    ):
        run()

    _, kwargs = mock_run.call_args
    assert kwargs["reload"] is False
    assert kwargs["workers"] == 8
