"""Root conftest for tests."""

import os
from unittest.mock import MagicMock

import pytest

if os.getenv("APP_ENV", "").strip().lower() == "prod":
    raise RuntimeError("Refusing to run tests with APP_ENV=prod")

os.environ["APP_ENV"] = "local"
os.environ.setdefault("SERVER_PORT", "8000")


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Auto-apply markers based on test directory structure."""
    dir_marker_map = {
        "unit": pytest.mark.unit,
        "smoke": pytest.mark.smoke,
    }
    for item in items:
        test_path = str(item.fspath)
        for dir_name, marker in dir_marker_map.items():
            if f"/{dir_name}/" in test_path or f"\\{dir_name}\\" in test_path:
                item.add_marker(marker)
                break


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so env changes made by a test take effect."""
    from runtime_insight.core.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def explanation():
    from runtime_insight.schemas.explanation import Explanation

    return Explanation(
        message="Test error",
        cause="Test cause",
        suggestions=["Fix 1", "Fix 2"],
        confidence=0.85,
        error_type="RuntimeError",
        location="app/routes.py:42",
    )


@pytest.fixture
def mock_analyzer(explanation):
    """Analyzer double returning a non-empty explanation."""
    analyzer = MagicMock()
    analyzer.analyze.return_value = explanation
    return analyzer


@pytest.fixture
def mock_logger():
    return MagicMock()


@pytest.fixture
def raised_exception():
    """An exception carrying a real traceback."""
    try:
        raise ValueError("Test error")
    except ValueError as exc:
        return exc
