"""Shared services module for external integrations."""

from src.fbconnect.services.posthog import PostHogService
from src.fbconnect.services.session import RequestSessionAuthenticator

__all__ = [
    "PostHogService",
    "RequestSessionAuthenticator",
]
