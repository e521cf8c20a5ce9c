"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from functools import partial

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from starlette.middleware.sessions import SessionMiddleware

from src.fbconnect.config import ProviderConfig, Settings, settings
from src.fbconnect.features.provider import router as provider_router
from src.fbconnect.middleware import IdentitySyncMiddleware
from src.fbconnect.provider.graph_client import GraphClient
from src.fbconnect.services.posthog import PostHogService
from src.fbconnect.sync.stores import (
    GroupDirectory,
    InMemoryGroupDirectory,
    InMemoryUserStore,
    UserStore,
)

logger = logging.getLogger(__name__)


class HealthCheckResponse(BaseModel):
    """Health check response."""

    status: str


def build_stores(app_settings: Settings) -> tuple[UserStore, GroupDirectory]:
    """
    Create the member store and group directory selected by `member_store`.

    Raises:
        ValueError: If `member_store` is not "supabase" or "memory"
    """
    if app_settings.member_store == "memory":
        return InMemoryUserStore(), InMemoryGroupDirectory()

    if app_settings.member_store == "supabase":
        from src.fbconnect.services.database import (
            SupabaseGroupDirectory,
            SupabaseUserStore,
            get_supabase_admin_client,
        )

        client_factory = partial(
            get_supabase_admin_client,
            app_settings.supabase_url,
            app_settings.supabase_service_role_key,
        )
        return (
            SupabaseUserStore(client_factory=client_factory),
            SupabaseGroupDirectory(client_factory=client_factory),
        )

    raise ValueError(f"Unsupported member store: {app_settings.member_store}")


def sync_free_paths(api_prefix: str) -> set[str]:
    """Routes that never need the synced member: health and the provider plumbing."""
    provider = f"{api_prefix}/provider"
    return {
        "/health",
        f"{provider}/bootstrap.js",
        f"{provider}/permissions",
        f"{provider}/login-url",
        f"{provider}/logout-url",
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle (startup and shutdown)."""
    logger.info(
        "Identity sync enabled",
        extra={
            "app_id": app.state.provider_config.app_id,
            "create_member": app.state.provider_config.create_member,
            "member_groups": list(app.state.provider_config.member_groups),
        },
    )

    yield

    # Shutdown
    try:
        await app.state.graph_client.close()
    except Exception as e:
        logger.error(f"Error during Graph client cleanup: {e}", exc_info=True)

    try:
        app.state.analytics.shutdown()
    except Exception as e:
        logger.error(f"Error during PostHog cleanup: {e}", exc_info=True)


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """
    Build the application with its provider config, stores and middleware.

    Args:
        app_settings: Settings to use (defaults to environment settings)

    Returns:
        Configured FastAPI application
    """
    app_settings = app_settings or settings
    provider_config = ProviderConfig.from_settings(app_settings)

    if not provider_config.app_id or not provider_config.api_secret:
        logger.warning("Provider app_id/api_secret not configured; sessions will not verify")

    graph_client = GraphClient(provider_config)
    user_store, group_directory = build_stores(app_settings)
    analytics = PostHogService(app_settings.posthog_api_key, app_settings.posthog_host)

    app = FastAPI(
        title="fbconnect",
        description="Social identity sync for the host application",
        version="0.1.0",
        debug=app_settings.debug,
        lifespan=lifespan,
    )
    app.state.provider_config = provider_config
    app.state.graph_client = graph_client
    app.state.user_store = user_store
    app.state.group_directory = group_directory
    app.state.analytics = analytics

    # Added first so SessionMiddleware wraps it and request.session is available.
    app.add_middleware(
        IdentitySyncMiddleware,
        config=provider_config,
        graph_client=graph_client,
        user_store=user_store,
        group_directory=group_directory,
        analytics=analytics,
        skip_sync_paths=sync_free_paths(app_settings.api_v1_prefix),
    )
    app.add_middleware(SessionMiddleware, secret_key=app_settings.session_secret_key)

    origins = app_settings.cors_origins.split(",")
    logger.info(f"Origins : {origins}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["Content-Type"],
    )

    app.include_router(provider_router, prefix=app_settings.api_v1_prefix)

    @app.get("/health", response_model=HealthCheckResponse)
    async def health_check() -> HealthCheckResponse:
        """Health check endpoint."""
        return HealthCheckResponse(status="healthy")

    return app


app = create_app()
