"""Identity sync: remote profile to local member record."""

from src.fbconnect.sync.adapter import IdentitySyncAdapter, apply_profile
from src.fbconnect.sync.exceptions import DuplicateMemberError, PersistenceFailure
from src.fbconnect.sync.models import (
    GroupMembership,
    LocalUserRecord,
    RemoteProfile,
    SyncPolicy,
    SyncResult,
)
from src.fbconnect.sync.permissions import PermissionSetBuilder
from src.fbconnect.sync.stores import (
    GroupDirectory,
    InMemoryGroupDirectory,
    InMemoryUserStore,
    SessionAuthenticator,
    UserStore,
)

__all__ = [
    "IdentitySyncAdapter",
    "apply_profile",
    "PermissionSetBuilder",
    "RemoteProfile",
    "LocalUserRecord",
    "GroupMembership",
    "SyncPolicy",
    "SyncResult",
    "UserStore",
    "SessionAuthenticator",
    "GroupDirectory",
    "InMemoryUserStore",
    "InMemoryGroupDirectory",
    "PersistenceFailure",
    "DuplicateMemberError",
]
