"""Shared fixtures for unit tests."""

import pytest

from employee_api.core.config import Settings


@pytest.fixture
def mock_settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Provide a Settings object with test values.

    Returns:
        Settings: Real settings built from test environment variables.
    """
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("APP_VERSION", "1.0.0")
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("API_HOST", "127.0.0.1")
    monkeypatch.setenv("API_PORT", "3000")

    return Settings()
