"""PostHog analytics service for event tracking."""

from posthog import Posthog


class PostHogService:
    """Service for tracking analytics events via PostHog."""

    def __init__(self, api_key: str | None = None, host: str = "https://app.posthog.com") -> None:
        """
        Initialize PostHog service.

        Args:
            api_key: Project API key; events are dropped when empty
            host: PostHog instance URL
        """
        self.client = Posthog(api_key, host=host) if api_key else None

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def capture(self, distinct_id: str, event: str, properties: dict | None = None) -> None:
        """
        Track an event.

        Args:
            distinct_id: Unique identifier for the visitor
            event: Event name (e.g., "provider_member_synced")
            properties: Optional event properties

        Example:
            >>> service = PostHogService(settings.posthog_api_key, settings.posthog_host)
            >>> service.capture("provider:123", "provider_member_synced", {"persisted": True})
        """
        if self.client is None:
            return

        self.client.capture(distinct_id=distinct_id, event=event, properties=properties or {})

    def shutdown(self) -> None:
        """Flush queued events."""
        if self.client is not None:
            self.client.shutdown()
