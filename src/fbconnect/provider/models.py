"""Data models for the identity provider boundary."""

from typing import Any

from pydantic import BaseModel, ConfigDict

from src.fbconnect.sync.models import RemoteProfile


class ProviderSession(BaseModel):
    """
    Session written by the provider's JS SDK into the `fbs_<app_id>` cookie.

    Attributes:
        uid: Provider user ID
        access_token: OAuth token used for Graph API calls
        session_key: Legacy session key
        secret: Session secret
        sig: MD5 signature over the other fields and the app secret
        expires: Unix expiry timestamp, 0 for offline sessions
        base_domain: Cookie domain, when the SDK sets one
    """

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    uid: str
    access_token: str
    session_key: str
    secret: str
    sig: str
    expires: int = 0
    base_domain: str | None = None

    def to_sdk_dict(self) -> dict[str, Any]:
        """Session in the shape `FB.init({session: ...})` accepts."""
        return self.model_dump(exclude_none=True)


class ProviderCallFailure(BaseModel):
    """Why fetching the remote profile failed."""

    model_config = ConfigDict(frozen=True)

    message: str
    error_type: str
    status_code: int | None = None


class ProfileResult(BaseModel):
    """
    Outcome of a profile fetch: exactly one of `profile` or `failure` is set.

    Example:
        >>> result = await graph_client.fetch_profile(session)
        >>> if result.ok:
        ...     adapter.sync(result.profile, policy)
    """

    model_config = ConfigDict(frozen=True)

    profile: RemoteProfile | None = None
    failure: ProviderCallFailure | None = None

    @property
    def ok(self) -> bool:
        return self.profile is not None

    @classmethod
    def succeeded(cls, profile: RemoteProfile) -> "ProfileResult":
        return cls(profile=profile)

    @classmethod
    def failed(cls, failure: ProviderCallFailure) -> "ProfileResult":
        return cls(failure=failure)
