"""Analyzer contract consumed by the framework integration."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from runtime_insight.schemas.explanation import Explanation


@runtime_checkable
class AnalyzerInterface(Protocol):
    """Maps a raised exception to an explanation.

    Contract:
    - MAY raise; callers treat a failure as "no explanation"
    - MUST return ``Explanation.empty()`` rather than ``None`` when there is
      nothing to say
    """

    def analyze(self, exception: BaseException) -> Explanation:
        """Analyze an exception and generate an explanation."""
        ...

    def analyze_from_log(
        self,
        message: str,
        file: str,
        line: int,
        exception_class: str = "Exception",
    ) -> Explanation:
        """Analyze a log entry so the explanation points at the logged location."""
        ...


class DisabledAnalyzer:
    """Analyzer used when no real analyzer is configured."""

    def analyze(self, exception: BaseException) -> Explanation:
        return Explanation.empty()

    def analyze_from_log(
        self,
        message: str,
        file: str,
        line: int,
        exception_class: str = "Exception",
    ) -> Explanation:
        return Explanation.empty()
