"""Minimal request-kernel event layer for FastAPI applications."""

from runtime_insight.kernel.dispatcher import EventDispatcher, EventSubscriber
from runtime_insight.kernel.events import ExceptionEvent, KernelEvents
from runtime_insight.kernel.exception_handling import install_exception_handler

__all__ = [
    "EventDispatcher",
    "EventSubscriber",
    "ExceptionEvent",
    "KernelEvents",
    "install_exception_handler",
]
