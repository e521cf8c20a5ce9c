"""Database connection and member storage."""

from src.fbconnect.services.database.connection import get_supabase_admin_client
from src.fbconnect.services.database.stores import SupabaseGroupDirectory, SupabaseUserStore
from src.fbconnect.services.database.utils import SupabaseQueryBuilder, get_query_builder

__all__ = [
    "get_supabase_admin_client",
    "SupabaseQueryBuilder",
    "get_query_builder",
    "SupabaseUserStore",
    "SupabaseGroupDirectory",
]
