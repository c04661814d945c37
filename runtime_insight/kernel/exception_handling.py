"""Bridge FastAPI's exception handling into kernel exception events."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from runtime_insight.kernel.dispatcher import EventDispatcher
from runtime_insight.kernel.events import ExceptionEvent, KernelEvents

logger = structlog.get_logger(__name__)


def _request_id(request: Request) -> str:
    # request.state lives in the ASGI scope, so an ID generated by middleware is visible here.
    return getattr(request.state, "request_id", None) or request.headers.get("x-request-id", "")


def _request_log_context(request: Request) -> dict[str, str]:
    return {
        "path": request.url.path,
        "method": request.method,
        "request_id": _request_id(request),
    }


def install_exception_handler(app: FastAPI, dispatcher: EventDispatcher) -> None:
    """Dispatch ``kernel.exception`` for every unhandled exception.

    Listeners observe the exception only; the response is always the
    generic 500 payload.
    """

    @app.exception_handler(Exception)
    async def kernel_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        request_context = _request_log_context(request)
        logger.error(
            "Unhandled exception",
            **request_context,
            error=str(exc),
            exc_info=exc,
        )
        # Runs outside the http middleware stack, so rebind the request ID here.
        with structlog.contextvars.bound_contextvars(request_id=request_context["request_id"]):
            dispatcher.dispatch(
                ExceptionEvent(exception=exc, request=request), KernelEvents.EXCEPTION
            )

        response = JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )
        if request_context["request_id"]:
            response.headers["X-Request-ID"] = request_context["request_id"]
        return response
