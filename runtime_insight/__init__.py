"""Runtime Insight exception explanations for FastAPI applications."""

from runtime_insight.analyzer import AnalyzerInterface, DisabledAnalyzer
from runtime_insight.schemas.explanation import Explanation

__version__ = "0.1.0"

__all__ = [
    "AnalyzerInterface",
    "DisabledAnalyzer",
    "Explanation",
]
