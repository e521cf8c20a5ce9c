"""Pytest configuration and shared fixtures."""

from urllib.parse import urlencode

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.fbconnect.config import ProviderConfig, Settings
from src.fbconnect.main import create_app
from src.fbconnect.provider.session import generate_signature

TEST_APP_ID = "test-app"
TEST_API_SECRET = "test-secret"


@pytest.fixture
def test_settings() -> Settings:
    """Settings with in-memory stores and test credentials."""
    return Settings(
        app_id=TEST_APP_ID,
        api_key="test-key",
        api_secret=TEST_API_SECRET,
        create_member=True,
        member_groups="subscribers",
        permissions="user_likes",
        member_store="memory",
        session_secret_key="test-session-secret",
        posthog_api_key=None,
    )


@pytest.fixture
def provider_config(test_settings: Settings) -> ProviderConfig:
    """Provider config built from the test settings."""
    return ProviderConfig.from_settings(test_settings)


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    """Application wired with the test settings."""
    return create_app(test_settings)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """
    Provide FastAPI test client for API testing.

    Example:
        >>> def test_health(client):
        >>>     response = client.get("/health")
        >>>     assert response.status_code == 200
    """
    return TestClient(app)


@pytest.fixture
def session_params() -> dict[str, str]:
    """Signed provider session parameters for uid 123."""
    params = {
        "uid": "123",
        "access_token": "test-access-token",
        "session_key": "test-session-key",
        "secret": "test-session-secret",
        "expires": "0",
    }
    params["sig"] = generate_signature(params, TEST_API_SECRET)
    return params


@pytest.fixture
def session_cookie(session_params: dict[str, str]) -> str:
    """Session cookie value as the JS SDK writes it."""
    return urlencode(session_params)
