"""API handlers for identity provider endpoints."""

import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response

from src.fbconnect.config import ProviderConfig
from src.fbconnect.features.provider.bootstrap import render_bootstrap_script
from src.fbconnect.features.provider.models import (
    PermissionsResponse,
    ProviderMemberResponse,
    ProviderUrlResponse,
)
from src.fbconnect.provider.dependencies import (
    get_graph_client,
    get_provider_config,
    get_provider_session,
    get_provider_sync,
)
from src.fbconnect.provider.graph_client import GraphClient
from src.fbconnect.provider.models import ProviderSession
from src.fbconnect.sync.models import SyncResult
from src.fbconnect.sync.permissions import PermissionSetBuilder

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/provider", tags=["provider"])


@router.get("/bootstrap.js")
async def get_bootstrap_script(
    config: ProviderConfig = Depends(get_provider_config),
    session: ProviderSession | None = Depends(get_provider_session),
) -> Response:
    """
    Script that loads the provider's JS SDK and initializes it.

    The SDK is initialized with the app ID and the session verified on this
    request, and reloads the page after a login in the browser.
    """
    script = render_bootstrap_script(config.app_id, session, locale=config.sdk_locale)
    return Response(
        content=script,
        media_type="application/javascript",
        headers={"Cache-Control": "no-store"},
    )


@router.get("/member", response_model=ProviderMemberResponse)
async def get_current_provider_member(
    sync: SyncResult | None = Depends(get_provider_sync),
) -> ProviderMemberResponse:
    """
    Get the member synced from the provider on this request.

    Works whether or not member creation is enabled; when it is disabled the
    member is returned with `persisted: false`.

    Example Response:
        {
            "member": {"id": null, "email": "a@b.com", "first_name": "A", ...},
            "persisted": false
        }
    """
    if sync is None:
        return ProviderMemberResponse(member=None, persisted=False)
    return ProviderMemberResponse(member=sync.record, persisted=sync.persisted)


@router.get("/permissions", response_model=PermissionsResponse)
async def get_permissions(
    config: ProviderConfig = Depends(get_provider_config),
) -> PermissionsResponse:
    """Extended permissions for the login button; includes `email` when members are created."""
    builder = PermissionSetBuilder()
    return PermissionsResponse(
        permissions=builder.build(config.permissions, require_email=config.create_member),
        scope=builder.scope_string(config.permissions, require_email=config.create_member),
    )


@router.get("/logout-url", response_model=ProviderUrlResponse)
async def get_logout_url(
    request: Request,
    next_url: str | None = Query(None, alias="next"),
    graph_client: GraphClient = Depends(get_graph_client),
    session: ProviderSession | None = Depends(get_provider_session),
) -> ProviderUrlResponse:
    """Provider logout URL, returning to `next` (defaults to the site root)."""
    url = graph_client.get_logout_url(next_url or str(request.base_url), session=session)
    return ProviderUrlResponse(url=url)


@router.get("/login-url", response_model=ProviderUrlResponse)
async def get_login_url(
    request: Request,
    next_url: str | None = Query(None, alias="next"),
    cancel_url: str | None = Query(None, alias="cancel"),
    config: ProviderConfig = Depends(get_provider_config),
    graph_client: GraphClient = Depends(get_graph_client),
) -> ProviderUrlResponse:
    """Provider login dialog URL requesting the configured permissions."""
    url = graph_client.get_login_url(
        next_url or str(request.base_url),
        cancel_url=cancel_url,
        scope=PermissionSetBuilder().scope_string(config.permissions, require_email=config.create_member),
    )
    return ProviderUrlResponse(url=url)
