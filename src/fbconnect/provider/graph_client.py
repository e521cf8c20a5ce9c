"""Graph API client for fetching the signed-in member's profile."""

import logging
from typing import Any
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from src.fbconnect.config import ProviderConfig
from src.fbconnect.provider.exceptions import GraphAPIError
from src.fbconnect.provider.models import ProfileResult, ProviderCallFailure, ProviderSession
from src.fbconnect.sync.models import RemoteProfile

logger = logging.getLogger(__name__)


class GraphClient:
    """
    Talks to the identity provider's Graph API and builds its login/logout URLs.

    Provider failures never escape `fetch_profile`: they come back as a failed
    `ProfileResult` so callers can fall back to an anonymous request.

    Attributes:
        config: Provider credentials and endpoints
        _http_client: HTTP client for Graph API calls

    Example:
        >>> client = GraphClient(config)
        >>> result = await client.fetch_profile(session)
        >>> result.profile.id if result.ok else result.failure.message
    """

    def __init__(self, config: ProviderConfig, http_client: httpx.AsyncClient | None = None):
        self.config = config
        self._http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout_seconds, connect=config.timeout_seconds)
        )

    async def fetch_profile(self, session: ProviderSession) -> ProfileResult:
        """
        Fetch `/me` for the session's access token.

        Args:
            session: Verified provider session

        Returns:
            ProfileResult holding the RemoteProfile, or the ProviderCallFailure
        """
        try:
            data = await self.api("/me", access_token=session.access_token)
            profile = RemoteProfile.model_validate(data)
        except GraphAPIError as e:
            logger.warning(
                f"Graph API call failed for uid {session.uid}: {e}",
                extra={"error_type": e.error_type, "status_code": e.status_code},
            )
            return ProfileResult.failed(
                ProviderCallFailure(message=str(e), error_type=e.error_type, status_code=e.status_code)
            )
        except ValidationError as e:
            logger.warning(
                f"Graph API returned an unusable profile for uid {session.uid}: {e}",
                extra={"error_type": "invalid_profile"},
            )
            return ProfileResult.failed(
                ProviderCallFailure(message=str(e), error_type="invalid_profile")
            )

        logger.debug("Fetched provider profile", extra={"provider_uid": profile.id})
        return ProfileResult.succeeded(profile)

    async def api(self, path: str, access_token: str, **params: Any) -> dict[str, Any]:
        """
        Call a Graph API path and return its decoded JSON body.

        Raises:
            GraphAPIError: On transport errors, non-2xx responses, error payloads
                or bodies that are not JSON objects
        """
        url = f"{self.config.graph_api_url}/{path.lstrip('/')}"
        query = {"access_token": access_token, **params}

        try:
            response = await self._http_client.get(url, params=query)
        except httpx.HTTPError as e:
            raise GraphAPIError(f"Request to {url} failed: {e}", error_type="transport_error") from e

        try:
            data = response.json()
        except ValueError as e:
            raise GraphAPIError(
                f"Graph API returned non-JSON body (HTTP {response.status_code})",
                error_type="invalid_response",
                status_code=response.status_code,
            ) from e

        if isinstance(data, dict) and "error" in data:
            error = data["error"] if isinstance(data["error"], dict) else {"message": str(data["error"])}
            raise GraphAPIError(
                error.get("message", "Unknown Graph API error"),
                error_type=error.get("type", "graph_api_error"),
                status_code=response.status_code,
            )

        if response.is_error:
            raise GraphAPIError(
                f"Graph API returned HTTP {response.status_code}",
                error_type="http_error",
                status_code=response.status_code,
            )

        if not isinstance(data, dict):
            raise GraphAPIError(
                "Graph API returned a non-object body",
                error_type="invalid_response",
                status_code=response.status_code,
            )

        return data

    def app_access_token(self) -> str:
        """Token used when no member session exists."""
        return f"{self.config.app_id}|{self.config.api_secret}"

    def get_logout_url(self, next_url: str, session: ProviderSession | None = None) -> str:
        """
        URL that signs the member out of the provider and returns to `next_url`.

        Args:
            next_url: Where the provider redirects after logout
            session: Current session; the app token is used without one
        """
        access_token = session.access_token if session else self.app_access_token()
        query = urlencode({"next": next_url, "access_token": access_token})
        return f"{self.config.www_url}/logout.php?{query}"

    def get_login_url(self, next_url: str, cancel_url: str | None = None, scope: str = "") -> str:
        """
        URL of the provider's login dialog.

        Args:
            next_url: Where the provider redirects after login, with `session` appended
            cancel_url: Where the provider redirects if the member cancels
            scope: Comma-joined extended permissions
        """
        params = {
            "api_key": self.config.app_id,
            "cancel_url": cancel_url or next_url,
            "display": "page",
            "fbconnect": 1,
            "next": next_url,
            "return_session": 1,
            "session_version": 3,
            "v": "1.0",
        }
        if scope:
            params["req_perms"] = scope
        return f"{self.config.www_url}/login.php?{urlencode(params)}"

    async def close(self) -> None:
        """
        Close HTTP client and cleanup resources.

        Should be called during application shutdown.
        """
        await self._http_client.aclose()
        logger.info("Graph client closed")
