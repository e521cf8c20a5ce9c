"""Tests for the Graph API client."""

from unittest.mock import AsyncMock, Mock
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from src.fbconnect.provider.graph_client import GraphClient
from src.fbconnect.provider.models import ProviderSession


@pytest.fixture
def session(session_params) -> ProviderSession:
    """Verified provider session."""
    return ProviderSession.model_validate(session_params)


@pytest.fixture
def graph_client(provider_config) -> GraphClient:
    """Graph client with a mocked HTTP client."""
    client = GraphClient(provider_config)
    client._http_client = Mock()
    client._http_client.get = AsyncMock()
    client._http_client.aclose = AsyncMock()
    return client


def _response(body, status_code: int = 200) -> Mock:
    response = Mock()
    response.status_code = status_code
    response.is_error = status_code >= 400
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


@pytest.mark.asyncio
class TestFetchProfile:
    """Tests for GraphClient.fetch_profile."""

    async def test_success(self, graph_client, session):
        graph_client._http_client.get.return_value = _response(
            {"id": "123", "email": "a@b.com", "first_name": "A", "timezone": 2, "locale": "en_US"}
        )

        result = await graph_client.fetch_profile(session)

        assert result.ok
        assert result.profile.id == "123"
        assert result.profile.email == "a@b.com"
        assert result.profile.timezone == "2"
        graph_client._http_client.get.assert_called_once_with(
            "https://graph.facebook.com/me",
            params={"access_token": "test-access-token"},
        )

    async def test_transport_error_becomes_failure(self, graph_client, session):
        graph_client._http_client.get.side_effect = httpx.ConnectError("Connection refused")

        result = await graph_client.fetch_profile(session)

        assert not result.ok
        assert result.profile is None
        assert result.failure.error_type == "transport_error"

    async def test_graph_error_payload_becomes_failure(self, graph_client, session):
        graph_client._http_client.get.return_value = _response(
            {"error": {"type": "OAuthException", "message": "Error validating access token"}},
            status_code=400,
        )

        result = await graph_client.fetch_profile(session)

        assert not result.ok
        assert result.failure.error_type == "OAuthException"
        assert result.failure.status_code == 400
        assert "access token" in result.failure.message

    async def test_http_error_without_payload(self, graph_client, session):
        graph_client._http_client.get.return_value = _response({}, status_code=503)

        result = await graph_client.fetch_profile(session)

        assert result.failure.error_type == "http_error"
        assert result.failure.status_code == 503

    async def test_non_json_body(self, graph_client, session):
        graph_client._http_client.get.return_value = _response(ValueError("Expecting value"))

        result = await graph_client.fetch_profile(session)

        assert result.failure.error_type == "invalid_response"

    async def test_legacy_false_body(self, graph_client, session):
        graph_client._http_client.get.return_value = _response(False)

        result = await graph_client.fetch_profile(session)

        assert result.failure.error_type == "invalid_response"

    async def test_profile_without_id(self, graph_client, session):
        graph_client._http_client.get.return_value = _response({"email": "a@b.com"})

        result = await graph_client.fetch_profile(session)

        assert result.failure.error_type == "invalid_profile"

    async def test_close(self, graph_client):
        await graph_client.close()

        graph_client._http_client.aclose.assert_awaited_once()


class TestProviderUrls:
    """Tests for login and logout URLs."""

    def test_logout_url_uses_session_token(self, graph_client, session):
        url = graph_client.get_logout_url("https://example.com/", session=session)

        parsed = urlparse(url)
        query = parse_qs(parsed.query)
        assert parsed.netloc == "www.facebook.com"
        assert parsed.path == "/logout.php"
        assert query["next"] == ["https://example.com/"]
        assert query["access_token"] == ["test-access-token"]

    def test_logout_url_without_session_uses_app_token(self, graph_client):
        url = graph_client.get_logout_url("https://example.com/")

        assert parse_qs(urlparse(url).query)["access_token"] == ["test-app|test-secret"]

    def test_login_url(self, graph_client):
        url = graph_client.get_login_url("https://example.com/", scope="user_likes,email")

        query = parse_qs(urlparse(url).query)
        assert urlparse(url).path == "/login.php"
        assert query["api_key"] == ["test-app"]
        assert query["cancel_url"] == ["https://example.com/"]
        assert query["req_perms"] == ["user_likes,email"]
        assert query["return_session"] == ["1"]

    def test_login_url_without_scope(self, graph_client):
        url = graph_client.get_login_url("https://example.com/", cancel_url="https://example.com/cancel")

        query = parse_qs(urlparse(url).query)
        assert "req_perms" not in query
        assert query["cancel_url"] == ["https://example.com/cancel"]
