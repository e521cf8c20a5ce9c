"""Supabase-backed member store and group directory.

Tables:
    members: id, email (unique when non-empty), first_name, surname,
        provider_link, provider_uid, provider_timezone
    groups: id, code (unique), title
    group_members: id, group_id, member_id (unique together)
"""

import logging
from typing import Any, Callable

from postgrest.exceptions import APIError
from supabase import Client

from src.fbconnect.services.database.utils import SupabaseQueryBuilder, get_query_builder
from src.fbconnect.sync.exceptions import DuplicateMemberError, PersistenceFailure
from src.fbconnect.sync.models import LocalUserRecord

logger = logging.getLogger(__name__)

MEMBERS_TABLE = "members"
GROUPS_TABLE = "groups"
GROUP_MEMBERS_TABLE = "group_members"

UNIQUE_VIOLATION = "23505"

MEMBER_COLUMNS = (
    "email",
    "first_name",
    "surname",
    "provider_link",
    "provider_uid",
    "provider_timezone",
)


def _row_to_record(row: dict[str, Any]) -> LocalUserRecord:
    return LocalUserRecord(
        id=str(row["id"]),
        **{column: row.get(column) or "" for column in MEMBER_COLUMNS},
    )


class _LazyQueryBuilder:
    """
    Defers creating the Supabase client until the first query.

    Args:
        db: Query builder to use as is
        client_factory: Builds the Supabase client on first use when `db` is None
    """

    def __init__(
        self,
        db: SupabaseQueryBuilder | None = None,
        client_factory: Callable[[], Client] | None = None,
    ) -> None:
        self._db = db
        self._client_factory = client_factory

    @property
    def db(self) -> SupabaseQueryBuilder:
        if self._db is None:
            client = self._client_factory() if self._client_factory else None
            self._db = get_query_builder(client)
        return self._db


class SupabaseUserStore(_LazyQueryBuilder):
    """Member records in the Supabase `members` table."""

    def find_by_email(self, email: str) -> LocalUserRecord | None:
        if not email:
            return None
        row = self.db.get_by_field(MEMBERS_TABLE, "email", email)
        return _row_to_record(row) if row else None

    def save(self, record: LocalUserRecord) -> LocalUserRecord:
        """
        Insert a new member or update an existing one.

        Raises:
            DuplicateMemberError: If inserting collides with an existing email
            PersistenceFailure: If Supabase rejects the write
        """
        data = record.model_dump(include=set(MEMBER_COLUMNS))

        try:
            if record.id is None:
                row = self.db.insert_record(MEMBERS_TABLE, data)
            else:
                row = self.db.update_record(MEMBERS_TABLE, record.id, data)
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise DuplicateMemberError(record.email) from e
            logger.error(
                f"Failed to save member: {e.message}",
                exc_info=True,
                extra={"error_type": "member_save_failed", "code": e.code},
            )
            raise PersistenceFailure(f"Failed to save member: {e.message}") from e

        if not row:
            raise PersistenceFailure(f"Member {record.id or record.email!r} was not saved")

        return _row_to_record(row)


class SupabaseGroupDirectory(_LazyQueryBuilder):
    """Group enrollment in the Supabase `groups` / `group_members` tables."""

    def enroll_by_code(self, record: LocalUserRecord, group_code: str) -> None:
        """
        Add the member to the group with `group_code`, creating the group if needed.

        Enrolling an existing member is a no-op.
        """
        if record.id is None:
            raise ValueError("Cannot enroll a member that has not been saved")

        group_id = self._ensure_group(group_code)
        membership = {"group_id": group_id, "member_id": record.id}

        if self.db.exists(GROUP_MEMBERS_TABLE, membership):
            return

        try:
            self.db.insert_record(GROUP_MEMBERS_TABLE, membership)
        except APIError as e:
            # A concurrent request enrolled the member first.
            if e.code != UNIQUE_VIOLATION:
                raise PersistenceFailure(f"Failed to enroll member in '{group_code}': {e.message}") from e

        logger.info(
            f"Enrolled member {record.id} in group '{group_code}'",
            extra={"member_id": record.id, "group_code": group_code},
        )

    def _ensure_group(self, group_code: str) -> str:
        group = self.db.get_by_field(GROUPS_TABLE, "code", group_code, columns="id")
        if group:
            return str(group["id"])

        try:
            group = self.db.insert_record(GROUPS_TABLE, {"code": group_code, "title": group_code})
            logger.info(f"Created group '{group_code}'")
        except APIError as e:
            if e.code != UNIQUE_VIOLATION:
                raise PersistenceFailure(f"Failed to create group '{group_code}': {e.message}") from e
            group = self.db.get_by_field(GROUPS_TABLE, "code", group_code, columns="id")

        if not group:
            raise PersistenceFailure(f"Group '{group_code}' could not be created")

        return str(group["id"])
