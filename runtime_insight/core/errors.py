"""Runtime Insight error hierarchy."""

from typing import Any


class RuntimeInsightError(Exception):
    """Base exception for Runtime Insight errors."""

    code = "RUNTIME_INSIGHT_INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.details = details
        super().__init__(message)


class ConfigurationError(RuntimeInsightError):
    """Invalid integration configuration."""

    code = "RUNTIME_INSIGHT_CONFIGURATION_ERROR"


class SubscriberConfigurationError(ConfigurationError):
    """A subscriber declared a listener the dispatcher cannot resolve.

    Raised while registering a subscriber, never while dispatching an event.
    """

    code = "RUNTIME_INSIGHT_SUBSCRIBER_INVALID"

    def __init__(
        self,
        message: str,
        subscriber: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details={**(details or {}), "subscriber": subscriber})
        self.subscriber = subscriber
