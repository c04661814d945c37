"""FastAPI integration for Runtime Insight."""

from runtime_insight.integration.bundle import RuntimeInsightBundle
from runtime_insight.integration.exception_subscriber import ExceptionSubscriber, ListenerOutcome

__all__ = [
    "ExceptionSubscriber",
    "ListenerOutcome",
    "RuntimeInsightBundle",
]
