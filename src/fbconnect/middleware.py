"""Request middleware that syncs the provider member before each request."""

import logging
from collections.abc import Iterable

from fastapi import Request
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from src.fbconnect.config import ProviderConfig
from src.fbconnect.provider.graph_client import GraphClient
from src.fbconnect.provider.models import ProviderSession
from src.fbconnect.provider.session import read_session
from src.fbconnect.services.posthog import PostHogService
from src.fbconnect.services.session import RequestSessionAuthenticator
from src.fbconnect.sync.adapter import IdentitySyncAdapter
from src.fbconnect.sync.stores import GroupDirectory, UserStore

logger = logging.getLogger(__name__)


class IdentitySyncMiddleware(BaseHTTPMiddleware):
    """
    Syncs the visitor's provider identity onto a local member.

    For each request carrying a valid provider session, fetches the profile
    from the Graph API and runs `IdentitySyncAdapter.sync`. Results are exposed
    on `request.state`:

    - `provider_session`: verified ProviderSession or None
    - `provider_member`: mapped LocalUserRecord or None
    - `provider_sync`: SyncResult or None

    Requests to `skip_sync_paths` still get `provider_session` but never call
    the Graph API or touch the stores.

    A failed provider call is logged and the request continues anonymously.
    Persistence errors propagate and fail the request.

    Must be wrapped by Starlette's `SessionMiddleware` so members can be logged in.
    """

    def __init__(
        self,
        app: ASGIApp,
        config: ProviderConfig,
        graph_client: GraphClient,
        user_store: UserStore,
        group_directory: GroupDirectory,
        analytics: PostHogService | None = None,
        skip_sync_paths: Iterable[str] = (),
    ):
        super().__init__(app)
        self.config = config
        self.policy = config.policy()
        self.graph_client = graph_client
        self.user_store = user_store
        self.group_directory = group_directory
        self.analytics = analytics or PostHogService()
        self.skip_sync_paths = frozenset(skip_sync_paths)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.provider_session = None
        request.state.provider_member = None
        request.state.provider_sync = None

        session = read_session(request, self.config)
        if session is not None:
            request.state.provider_session = session
            if request.url.path not in self.skip_sync_paths:
                await self._sync(request, session)

        return await call_next(request)

    async def _sync(self, request: Request, session: ProviderSession) -> None:
        result = await self.graph_client.fetch_profile(session)

        if not result.ok:
            logger.warning(
                f"Skipping provider sync for uid {session.uid}: {result.failure.message}",
                extra={"error_type": result.failure.error_type, "path": request.url.path},
            )
            self.analytics.capture(
                distinct_id=f"provider:{session.uid}",
                event="provider_call_failed",
                properties={"error": result.failure.error_type},
            )
            return

        adapter = IdentitySyncAdapter(
            user_store=self.user_store,
            authenticator=RequestSessionAuthenticator(request),
            group_directory=self.group_directory,
        )
        sync_result = await run_in_threadpool(adapter.sync, result.profile, self.policy)

        request.state.provider_sync = sync_result
        request.state.provider_member = sync_result.record

        self.analytics.capture(
            distinct_id=f"provider:{result.profile.id}",
            event="provider_member_synced",
            properties={"persisted": sync_result.persisted, "member_id": sync_result.record.id},
        )
