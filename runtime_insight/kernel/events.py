"""Kernel events raised while a request is being handled."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from starlette.requests import Request


class KernelEvents:
    """Event names dispatched by the request kernel."""

    # Fired when an exception escapes a route handler.
    EXCEPTION = "kernel.exception"


@dataclass(frozen=True)
class ExceptionEvent:
    """Notification that an unhandled exception occurred during a request."""

    exception: BaseException
    request: Request | None = None

    def get_throwable(self) -> BaseException:
        return self.exception
