"""Tests for PostHogService."""

from unittest.mock import patch

from src.fbconnect.services.posthog import PostHogService


def test_without_key_events_are_dropped() -> None:
    with patch("src.fbconnect.services.posthog.Posthog") as posthog_cls:
        service = PostHogService(None)
        service.capture("provider:1", "provider_member_synced")
        service.shutdown()

    assert service.enabled is False
    posthog_cls.assert_not_called()


def test_capture_uses_own_client() -> None:
    with patch("src.fbconnect.services.posthog.Posthog") as posthog_cls:
        service = PostHogService("phc_key", host="https://eu.posthog.com")
        service.capture("provider:1", "provider_call_failed", {"error": "OAuthException"})

    posthog_cls.assert_called_once_with("phc_key", host="https://eu.posthog.com")
    posthog_cls.return_value.capture.assert_called_once_with(
        distinct_id="provider:1", event="provider_call_failed", properties={"error": "OAuthException"}
    )


def test_two_services_keep_separate_keys() -> None:
    with patch("src.fbconnect.services.posthog.Posthog") as posthog_cls:
        PostHogService("key-a")
        PostHogService("key-b")

    assert [call.args[0] for call in posthog_cls.call_args_list] == ["key-a", "key-b"]
