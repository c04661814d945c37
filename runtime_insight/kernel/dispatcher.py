"""Priority-ordered event dispatcher."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol

import structlog

from runtime_insight.core.errors import SubscriberConfigurationError

logger = structlog.get_logger(__name__)

Listener = Callable[[Any], Any]
SubscriptionSpec = str | tuple[str] | tuple[str, int]


class EventSubscriber(Protocol):
    """Object that declares the events it listens to."""

    @classmethod
    def get_subscribed_events(cls) -> Mapping[str, SubscriptionSpec]:
        """Map event name to a method name or ``(method_name, priority)``."""
        ...


class EventDispatcher:
    """Dispatches events to listeners, highest priority first.

    Listeners with equal priority run in registration order.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[tuple[int, int, Listener]]] = {}
        self._sequence = 0

    def add_listener(self, event_name: str, listener: Listener, priority: int = 0) -> None:
        """Register a callable for an event."""
        self._listeners.setdefault(event_name, []).append((priority, self._sequence, listener))
        self._sequence += 1

    def add_subscriber(self, subscriber: EventSubscriber) -> None:
        """Register every listener declared by a subscriber's subscription table."""
        subscriber_name = type(subscriber).__name__
        for event_name, spec in subscriber.get_subscribed_events().items():
            method_name, priority = _parse_subscription(spec, subscriber_name, event_name)
            method = getattr(subscriber, method_name, None)
            if not callable(method):
                raise SubscriberConfigurationError(
                    f"Subscriber has no listener method: {method_name}",
                    subscriber=subscriber_name,
                    details={"event": event_name, "method": method_name},
                )
            self.add_listener(event_name, method, priority)
            logger.debug(
                "Registered event listener",
                subscriber=subscriber_name,
                event_name=event_name,
                method=method_name,
                priority=priority,
            )

    def get_listeners(self, event_name: str) -> list[Listener]:
        """Return the listeners for an event in call order."""
        entries = self._listeners.get(event_name, [])
        return [listener for _, _, listener in sorted(entries, key=lambda e: (-e[0], e[1]))]

    def get_listener_priority(self, event_name: str, listener: Listener) -> int | None:
        for priority, _, registered in self._listeners.get(event_name, []):
            if registered == listener:
                return priority
        return None

    def has_listeners(self, event_name: str) -> bool:
        return bool(self._listeners.get(event_name))

    def dispatch(self, event: Any, event_name: str) -> Any:
        """Call every listener of ``event_name`` with ``event``.

        Listener return values are ignored. Returns the event.
        """
        for listener in self.get_listeners(event_name):
            listener(event)
        return event


def _parse_subscription(
    spec: SubscriptionSpec, subscriber_name: str, event_name: str
) -> tuple[str, int]:
    if isinstance(spec, str):
        return spec, 0
    if isinstance(spec, tuple) and len(spec) == 1 and isinstance(spec[0], str):
        return spec[0], 0
    if (
        isinstance(spec, tuple)
        and len(spec) == 2
        and isinstance(spec[0], str)
        and isinstance(spec[1], int)
        and not isinstance(spec[1], bool)
    ):
        return spec[0], spec[1]
    raise SubscriberConfigurationError(
        f"Invalid subscription for event: {event_name}",
        subscriber=subscriber_name,
        details={"event": event_name, "spec": repr(spec)},
    )
