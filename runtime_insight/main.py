"""Runtime Insight demo host.

Boots a FastAPI application with the Runtime Insight bundle installed so
unhandled exceptions are explained in the debug log.
"""

import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import APIRouter, FastAPI, Request
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import (
    DEPLOYMENT_ENVIRONMENT,
    SERVICE_NAME,
    SERVICE_VERSION,
    Resource,
)
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from runtime_insight.analyzer import AnalyzerInterface, DisabledAnalyzer
from runtime_insight.core.config import AppEnvironment, Settings, get_settings
from runtime_insight.core.logging import setup_logging
from runtime_insight.integration.bundle import RuntimeInsightBundle

logger = structlog.get_logger(__name__)

health_router = APIRouter(tags=["health"])


@health_router.get("/health")
async def health_check() -> dict[str, str]:
    """Basic health check."""
    return {"status": "ok"}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan context manager."""
    settings = get_settings()
    setup_logging()

    logger.info(
        "Starting Runtime Insight host",
        app=settings.app.name,
        env=settings.app.env.value,
        version=settings.app.version,
        runtime_insight_enabled=settings.runtime_insight_enabled,
    )

    yield

    logger.info("Runtime Insight host stopped")


def create_app(analyzer: AnalyzerInterface | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Runtime Insight",
        description="Explains unhandled exceptions in the application log.",
        version=settings.app.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.app.env != AppEnvironment.PROD else None,
        redoc_url="/redoc" if settings.app.env != AppEnvironment.PROD else None,
        openapi_url="/openapi.json" if settings.app.env != AppEnvironment.PROD else None,
    )

    app.include_router(health_router)

    bundle = RuntimeInsightBundle(analyzer or DisabledAnalyzer(), settings=settings)
    bundle.boot(app)
    app.state.bundle = bundle

    setup_telemetry(app, settings)

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        """Bind the request ID to the log context for the request's duration."""
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        try:
            response = await call_next(request)
        finally:
            # Prevent context leakage across requests in long-lived workers.
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers["X-Request-ID"] = request_id
        return response

    return app


def build_tracer_provider(settings: Settings) -> TracerProvider:
    """Tracer provider tagged with the host and whether explanations are on."""
    resource = Resource(
        attributes={
            SERVICE_NAME: settings.observability.service_name,
            SERVICE_VERSION: settings.app.version,
            DEPLOYMENT_ENVIRONMENT: settings.app.env.value,
            "runtime_insight.enabled": settings.runtime_insight_enabled,
        }
    )
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(
        BatchSpanProcessor(
            OTLPSpanExporter(
                endpoint=settings.observability.otlp_endpoint,
                insecure=settings.observability.otlp_insecure,
            )
        )
    )
    return provider


def setup_telemetry(app: FastAPI, settings: Settings) -> bool:
    """Instrument the app when an OTLP endpoint is configured."""
    if not settings.observability.otlp_endpoint:
        return False

    trace.set_tracer_provider(build_tracer_provider(settings))
    FastAPIInstrumentor.instrument_app(app, excluded_urls="health")
    return True


def run() -> None:
    """Serve the demo host with uvicorn."""
    import uvicorn

    settings = get_settings()
    local = settings.app.env == AppEnvironment.LOCAL

    # Reload only works with a single worker.
    uvicorn.run(
        "runtime_insight.main:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        reload=local,
        workers=1 if local else settings.server.workers,
        log_level=settings.app.log_level.value.lower(),
    )


if __name__ == "__main__":
    run()
