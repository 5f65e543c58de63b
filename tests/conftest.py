"""Pytest configuration shared across the suite."""

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from file_insights.core.config import get_settings


@pytest.fixture
def anyio_backend() -> str:
    """Analysis services rely on asyncio timeouts, so only run that backend."""
    return "asyncio"


@pytest.fixture()
def fresh_settings():
    """Drop cached settings so a test can rebuild them from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
