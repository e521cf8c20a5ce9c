"""Supabase database connection management."""

from functools import lru_cache

from supabase import Client, create_client

from src.fbconnect.config import settings


@lru_cache(maxsize=4)
def get_supabase_admin_client(url: str | None = None, service_role_key: str | None = None) -> Client:
    """
    Get Supabase admin client with service role key (one per url/key pair).

    Member sync writes on behalf of visitors who have no Supabase session of
    their own, so it bypasses Row-Level Security with the service role key.

    Args:
        url: Supabase project URL (defaults to environment settings)
        service_role_key: Service role key (defaults to environment settings)

    Returns:
        Configured Supabase client with service role key

    Example:
        >>> client = get_supabase_admin_client(app_settings.supabase_url, app_settings.supabase_service_role_key)
        >>> response = client.table("members").select("*").eq("email", email).execute()
    """
    return create_client(url or settings.supabase_url, service_role_key or settings.supabase_service_role_key)
