"""Event subscriber that analyzes kernel exceptions with Runtime Insight."""

from __future__ import annotations

import builtins
import traceback
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from runtime_insight.kernel.events import KernelEvents

if TYPE_CHECKING:
    from runtime_insight.analyzer import AnalyzerInterface
    from runtime_insight.kernel.events import ExceptionEvent
    from runtime_insight.schemas.explanation import Explanation

EXPLANATION_LOG_EVENT = "Runtime Insight Explanation"


@dataclass(frozen=True)
class ListenerOutcome:
    """Result of one listener run.

    The dispatcher discards it; it exists so the swallowed failure is
    visible to callers that want it, such as tests.
    """

    logged: bool = False
    error: Exception | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class ExceptionSubscriber:
    """Logs an analyzer explanation for every unhandled request exception."""

    def __init__(self, analyzer: AnalyzerInterface, logger: Any) -> None:
        self._analyzer = analyzer
        self._logger = logger

    @classmethod
    def get_subscribed_events(cls) -> dict[str, tuple[str, int]]:
        return {
            KernelEvents.EXCEPTION: ("on_kernel_exception", 0),
        }

    def on_kernel_exception(self, event: ExceptionEvent) -> ListenerOutcome:
        """Handle kernel exception event.

        Never raises: a broken analyzer or logger must not interfere with the
        exception the framework is already handling.
        """
        try:
            exception = event.get_throwable()
            explanation = self._analyzer.analyze(exception)

            if explanation.is_empty():
                return ListenerOutcome()

            self._log_explanation(explanation, exception)
        except Exception as exc:
            return ListenerOutcome(error=exc)
        return ListenerOutcome(logged=True)

    def _log_explanation(self, explanation: Explanation, exception: BaseException) -> None:
        file, line = exception_origin(exception)
        context = {
            "exception": exception_type_name(exception),
            "file": file,
            "line": line,
            "explanation": {
                "message": explanation.message,
                "cause": explanation.cause,
                "suggestions": explanation.suggestions,
                "confidence": explanation.confidence,
                "error_type": explanation.error_type,
                "location": explanation.location,
            },
        }

        self._logger.debug(EXPLANATION_LOG_EVENT, **context)


def exception_type_name(exception: BaseException) -> str:
    """Return the runtime type name, unqualified for builtins."""
    exc_type = type(exception)
    if exc_type.__module__ == builtins.__name__:
        return exc_type.__qualname__
    return f"{exc_type.__module__}.{exc_type.__qualname__}"


def exception_origin(exception: BaseException) -> tuple[str | None, int | None]:
    """Return the file and line the exception was raised from."""
    frames = traceback.extract_tb(exception.__traceback__)
    if not frames:
        return None, None
    origin = frames[-1]
    return origin.filename, origin.lineno
