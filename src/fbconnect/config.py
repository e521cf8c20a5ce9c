"""Application configuration using Pydantic Settings."""

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.fbconnect.sync.models import SyncPolicy


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # System Configuration
    api_v1_prefix: str = "/api/v1"
    debug: bool = False
    cors_origins: str = "http://localhost:3000,http://localhost:4173"
    session_secret_key: str = "change-me"

    # Identity provider credentials
    app_id: str = ""
    api_key: str = ""
    api_secret: str = ""

    # Sync policy
    create_member: bool = True
    member_groups: str = ""  # Comma-separated group codes
    permissions: str = ""  # Comma-separated extended permissions

    # Identity provider endpoints
    graph_api_url: str = "https://graph.facebook.com"
    www_url: str = "https://www.facebook.com"
    sdk_locale: str = "en_US"
    provider_timeout_seconds: float = 10.0

    # Member storage: "supabase" or "memory"
    member_store: str = "supabase"

    # Supabase Configuration
    supabase_url: str = "https://test.supabase.co"
    supabase_service_role_key: str = "test-service-role-key"

    # PostHog Configuration
    posthog_api_key: str | None = None
    posthog_host: str = "https://app.posthog.com"


class ProviderConfig(BaseModel):
    """
    Immutable snapshot of the provider credentials and sync policy.

    Built once when the application is created and handed to the middleware
    and handlers, so nothing reads process-wide settings mid-request.

    Example:
        >>> config = ProviderConfig.from_settings(Settings(app_id="123", member_groups="a,b"))
        >>> config.member_groups
        ('a', 'b')
    """

    model_config = ConfigDict(frozen=True)

    app_id: str
    api_key: str = ""
    api_secret: str
    create_member: bool = True
    member_groups: tuple[str, ...] = ()
    permissions: tuple[str, ...] = ()
    graph_api_url: str = "https://graph.facebook.com"
    www_url: str = "https://www.facebook.com"
    sdk_locale: str = "en_US"
    timeout_seconds: float = 10.0

    @classmethod
    def from_settings(cls, source: Settings) -> "ProviderConfig":
        return cls(
            app_id=source.app_id,
            api_key=source.api_key,
            api_secret=source.api_secret,
            create_member=source.create_member,
            member_groups=_split_csv(source.member_groups),
            permissions=_split_csv(source.permissions),
            graph_api_url=source.graph_api_url.rstrip("/"),
            www_url=source.www_url.rstrip("/"),
            sdk_locale=source.sdk_locale,
            timeout_seconds=source.provider_timeout_seconds,
        )

    @property
    def cookie_name(self) -> str:
        """Name of the cookie the JS SDK writes the session into."""
        return f"fbs_{self.app_id}"

    def policy(self) -> SyncPolicy:
        """Sync policy derived from the member creation flags."""
        return SyncPolicy(create_record=self.create_member, target_groups=self.member_groups)


settings = Settings()
