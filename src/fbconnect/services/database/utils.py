"""Generic database utility functions for Supabase interactions."""

from typing import Any
from uuid import UUID

from supabase import Client

from src.fbconnect.services.database.connection import get_supabase_admin_client


class SupabaseQueryBuilder:
    """Helper class for building and executing Supabase queries."""

    def __init__(self, client: Client | None = None) -> None:
        """
        Initialize query builder.

        Args:
            client: Supabase client instance (uses the admin client if None)
        """
        self.client = client or get_supabase_admin_client()

    def get_by_field(
        self, table: str, field: str, value: Any, columns: str = "*"
    ) -> dict[str, Any] | None:
        """
        Fetch a single record by field value.

        Args:
            table: Table name
            field: Field name to filter by
            value: Field value
            columns: Columns to select (default: "*")

        Returns:
            First matching record or None

        Example:
            >>> builder = SupabaseQueryBuilder()
            >>> member = builder.get_by_field("members", "email", "user@example.com")
        """
        response = self.client.table(table).select(columns).eq(field, value).limit(1).execute()
        return response.data[0] if response.data else None

    def insert_record(self, table: str, data: dict[str, Any]) -> dict[str, Any] | None:
        """
        Insert a single record.

        Args:
            table: Table name
            data: Record data dictionary

        Returns:
            Inserted record dictionary or None if failed

        Raises:
            postgrest.exceptions.APIError: If insert operation fails

        Example:
            >>> builder = SupabaseQueryBuilder()
            >>> member = builder.insert_record("members", {"email": "a@b.com", "first_name": "A"})
        """
        response = self.client.table(table).insert(data).execute()
        return response.data[0] if response.data else None

    def update_record(
        self, table: str, record_id: UUID | str, data: dict[str, Any]
    ) -> dict[str, Any] | None:
        """
        Update a record by ID.

        Args:
            table: Table name
            record_id: Record UUID or ID
            data: Fields to update

        Returns:
            Updated record dictionary or None if not found
        """
        response = self.client.table(table).update(data).eq("id", str(record_id)).execute()
        return response.data[0] if response.data else None

    def exists(self, table: str, filters: dict[str, Any]) -> bool:
        """
        Check if record(s) exist matching filters.

        Args:
            table: Table name
            filters: Dictionary of field:value pairs for filtering

        Returns:
            True if at least one matching record exists

        Example:
            >>> builder = SupabaseQueryBuilder()
            >>> builder.exists("group_members", {"group_id": group_id, "member_id": member_id})
        """
        query = self.client.table(table).select("id")

        for field, value in filters.items():
            query = query.eq(field, value)

        response = query.limit(1).execute()
        return len(response.data) > 0


def get_query_builder(client: Client | None = None) -> SupabaseQueryBuilder:
    """
    Get instance of SupabaseQueryBuilder.

    Args:
        client: Optional Supabase client (uses the admin client if None)

    Returns:
        SupabaseQueryBuilder instance
    """
    return SupabaseQueryBuilder(client)
