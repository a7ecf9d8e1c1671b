"""Root conftest.py for the Employee API test suite.

This file contains project-wide fixtures and pytest configuration.
"""

import os
from collections.abc import Generator
from typing import Any

import pytest
from loguru import logger

from employee_api.core.config import get_settings
from employee_api.core.context import RequestContext


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components in isolation"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that test multiple components"
    )


@pytest.fixture(autouse=True)
def clean_env(
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[pytest.MonkeyPatch]:
    """Remove application environment variables for the duration of a test.

    Args:
        monkeypatch: Pytest monkeypatch fixture.

    Yields:
        pytest.MonkeyPatch: The monkeypatch instance for env manipulation.
    """
    env_prefixes = [
        "APP_",
        "API_",
        "ENVIRONMENT",
        "DEBUG",
        "PORT",
        "KEEP_ALIVE_TIMEOUT",
        "LOG_CONFIG__",
        "METRICS_CONFIG__",
        "DOCS_CONFIG__",
        "DATABASE_CONFIG__",
    ]
    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in env_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield monkeypatch


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None]:
    """Clear the settings cache before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def clean_request_context() -> Generator[None]:
    """Keep correlation and request IDs from leaking between tests."""
    RequestContext.clear()
    yield
    RequestContext.clear()


@pytest.fixture
def log_records() -> Generator[list[dict[str, Any]]]:
    """Capture every Loguru record emitted during the test.

    Yields:
        list[dict[str, Any]]: Records in emission order.
    """
    records: list[dict[str, Any]] = []
    handler_id = logger.add(
        lambda message: records.append(message.record), level="DEBUG"
    )
    yield records
    logger.remove(handler_id)
