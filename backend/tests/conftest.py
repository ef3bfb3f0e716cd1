"""Shared test configuration and pytest markers."""

import pytest

from api.router import limiter


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "api: exercises the FastAPI app through TestClient"
    )


@pytest.fixture(autouse=True)
def no_rate_limit():
    """Rate limiting is covered by slowapi; tests hit the routes freely."""
    limiter.enabled = False
    yield
    limiter.enabled = True
