"""Installable bundle wiring Runtime Insight into a FastAPI application."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

import structlog

from runtime_insight.core.config import Settings, get_settings
from runtime_insight.core.logging import get_explanation_logger
from runtime_insight.integration.exception_subscriber import ExceptionSubscriber
from runtime_insight.kernel.dispatcher import EventDispatcher
from runtime_insight.kernel.exception_handling import install_exception_handler

if TYPE_CHECKING:
    from fastapi import FastAPI

    from runtime_insight.analyzer import AnalyzerInterface

logger = structlog.get_logger(__name__)


class RuntimeInsightBundle:
    """Bundle for Runtime Insight."""

    name = "RuntimeInsightBundle"
    alias = "runtime_insight"

    def __init__(
        self,
        analyzer: AnalyzerInterface,
        logger: Any | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._analyzer = analyzer
        self._logger = logger
        self._settings = settings

    def get_path(self) -> str:
        """Directory holding the bundle's package resources."""
        return os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    def boot(self, app: FastAPI, dispatcher: EventDispatcher | None = None) -> EventDispatcher:
        """Register the exception subscriber and hook the app's exception handling."""
        settings = self._settings or get_settings()
        dispatcher = dispatcher or EventDispatcher()

        if settings.runtime_insight_enabled:
            subscriber = ExceptionSubscriber(
                self._analyzer,
                self._logger or get_explanation_logger(settings.runtime_insight.log_level.value),
            )
            dispatcher.add_subscriber(subscriber)
        else:
            logger.info(
                "Runtime Insight disabled for environment",
                env=settings.app.env.value,
            )

        install_exception_handler(app, dispatcher)
        app.state.event_dispatcher = dispatcher
        return dispatcher
