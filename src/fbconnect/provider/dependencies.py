"""FastAPI dependencies exposing provider state to route handlers."""

from fastapi import Request

from src.fbconnect.config import ProviderConfig
from src.fbconnect.provider.graph_client import GraphClient
from src.fbconnect.provider.models import ProviderSession
from src.fbconnect.sync.models import LocalUserRecord, SyncResult


def get_provider_config(request: Request) -> ProviderConfig:
    """
    Get the provider configuration the application was created with.

    Raises:
        RuntimeError: If the application was not built with `create_app`
    """
    config = getattr(request.app.state, "provider_config", None)
    if config is None:
        raise RuntimeError("Provider config not initialized. Build the app with create_app().")
    return config


def get_graph_client(request: Request) -> GraphClient:
    """
    Get the application's Graph API client.

    Raises:
        RuntimeError: If the application was not built with `create_app`
    """
    client = getattr(request.app.state, "graph_client", None)
    if client is None:
        raise RuntimeError("Graph client not initialized. Build the app with create_app().")
    return client


def get_provider_session(request: Request) -> ProviderSession | None:
    """Verified provider session found by IdentitySyncMiddleware, if any."""
    return getattr(request.state, "provider_session", None)


def get_provider_sync(request: Request) -> SyncResult | None:
    """Result of this request's sync, if one happened."""
    return getattr(request.state, "provider_sync", None)


def get_provider_member(request: Request) -> LocalUserRecord | None:
    """
    Member mapped from the provider profile on this request.

    Available even when member creation is disabled, in which case the record
    was never saved.

    Example:
        @router.get("/hello")
        async def hello(member: LocalUserRecord | None = Depends(get_provider_member)):
            return {"name": member.first_name if member else "guest"}
    """
    return getattr(request.state, "provider_member", None)
