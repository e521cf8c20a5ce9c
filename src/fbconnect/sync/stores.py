"""Collaborator protocols consumed by the sync adapter, plus in-memory versions."""

import logging
import threading
from typing import Protocol
from uuid import uuid4

from src.fbconnect.sync.exceptions import DuplicateMemberError
from src.fbconnect.sync.models import GroupMembership, LocalUserRecord

logger = logging.getLogger(__name__)


class UserStore(Protocol):
    """Lookup and persistence of local member records."""

    def find_by_email(self, email: str) -> LocalUserRecord | None: ...

    def save(self, record: LocalUserRecord) -> LocalUserRecord: ...


class SessionAuthenticator(Protocol):
    """Logs the current request in as a member."""

    def login_as(self, record: LocalUserRecord) -> None: ...


class GroupDirectory(Protocol):
    """Enrolls members into groups by group code."""

    def enroll_by_code(self, record: LocalUserRecord, group_code: str) -> None: ...


class InMemoryUserStore:
    """
    Process-local member store.

    Non-empty emails are unique, mirroring the partial unique index on the
    Supabase `members` table. Records are copied on the way in and out so a
    caller mutating a looked-up record never changes stored state without
    calling `save`.
    """

    def __init__(self) -> None:
        self._records: dict[str, LocalUserRecord] = {}
        self._lock = threading.Lock()

    def find_by_email(self, email: str) -> LocalUserRecord | None:
        if not email:
            return None
        with self._lock:
            for record in self._records.values():
                if record.email == email:
                    return record.model_copy()
        return None

    def save(self, record: LocalUserRecord) -> LocalUserRecord:
        stored = record.model_copy()

        # Uniqueness check and insert must happen under one lock acquisition.
        with self._lock:
            if stored.email:
                for existing in self._records.values():
                    if existing.email == stored.email and existing.id != stored.id:
                        raise DuplicateMemberError(stored.email)

            if stored.id is None:
                stored.id = str(uuid4())
            self._records[stored.id] = stored
            result = stored.model_copy()

        logger.debug(f"Saved member {result.id}", extra={"member_id": result.id})
        return result

    def get(self, member_id: str) -> LocalUserRecord | None:
        with self._lock:
            record = self._records.get(member_id)
            return record.model_copy() if record else None

    def all(self) -> list[LocalUserRecord]:
        with self._lock:
            return [record.model_copy() for record in self._records.values()]


class InMemoryGroupDirectory:
    """Process-local groups; unknown group codes are created on first enrollment."""

    def __init__(self) -> None:
        self._groups: dict[str, str] = {}
        self._memberships: set[GroupMembership] = set()
        self._lock = threading.Lock()

    def enroll_by_code(self, record: LocalUserRecord, group_code: str) -> None:
        if record.id is None:
            raise ValueError("Cannot enroll a member that has not been saved")

        with self._lock:
            created = group_code not in self._groups
            if created:
                self._groups[group_code] = group_code
            self._memberships.add(GroupMembership(member_id=record.id, group_code=group_code))

        if created:
            logger.info(f"Created group '{group_code}'")

    def memberships(self) -> set[GroupMembership]:
        with self._lock:
            return set(self._memberships)

    def groups(self) -> list[str]:
        with self._lock:
            return list(self._groups)
