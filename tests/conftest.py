"""Shared fixtures for the proxy tests."""

import pytest
from fastapi.testclient import TestClient

from app.api.chat import get_openrouter_client
from app.config import Settings, get_settings
from app.main import app


@pytest.fixture
def configured_settings() -> Settings:
    return Settings(openrouter_api_key="test-key", request_timeout_seconds=0.5)


@pytest.fixture
def unconfigured_settings() -> Settings:
    return Settings(openrouter_api_key=None)


@pytest.fixture
def override():
    """Installs settings and an upstream client for the duration of a test."""

    def _override(settings: Settings, upstream=None) -> None:
        app.dependency_overrides[get_settings] = lambda: settings
        if upstream is not None:
            app.dependency_overrides[get_openrouter_client] = lambda: upstream

    yield _override
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)
