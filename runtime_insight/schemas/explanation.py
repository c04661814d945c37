"""Explanation schema produced by exception analyzers."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Explanation(BaseModel):
    """Diagnostic record describing why an exception happened.

    Built by an analyzer; the integration only reads it.
    """

    model_config = ConfigDict(frozen=True)

    message: str
    cause: str
    suggestions: list[str] = Field(default_factory=list)
    confidence: float = 0.0
    error_type: str | None = None
    location: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def empty(cls) -> Explanation:
        """Explanation returned when analysis is disabled or found nothing."""
        return cls(message="", cause="")

    def is_empty(self) -> bool:
        return self.message == "" and self.cause == ""

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()
