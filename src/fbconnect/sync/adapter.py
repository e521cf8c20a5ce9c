"""Maps provider profiles onto local member records."""

import logging

from tenacity import retry, retry_if_exception_type, stop_after_attempt

from src.fbconnect.sync.exceptions import DuplicateMemberError
from src.fbconnect.sync.models import LocalUserRecord, RemoteProfile, SyncPolicy, SyncResult
from src.fbconnect.sync.stores import GroupDirectory, SessionAuthenticator, UserStore

logger = logging.getLogger(__name__)


def apply_profile(record: LocalUserRecord, profile: RemoteProfile) -> LocalUserRecord:
    """Overwrite the record's provider fields from the profile (last write wins)."""
    record.email = profile.email or ""
    record.first_name = profile.first_name or ""
    record.surname = profile.last_name or ""
    record.provider_link = profile.link or ""
    record.provider_uid = profile.id or ""
    record.provider_timezone = profile.timezone or ""
    return record


class IdentitySyncAdapter:
    """
    Resolves or creates the local member for a verified remote profile.

    Members are matched by exact email only; a profile without an email always
    yields a fresh record. When the policy allows member creation the record is
    saved, the request is logged in as that member and the member is enrolled
    into every target group.

    Attributes:
        user_store: Lookup/persistence of member records
        authenticator: Session login for the current request
        group_directory: Group enrollment by group code

    Example:
        >>> adapter = IdentitySyncAdapter(store, authenticator, groups)
        >>> result = adapter.sync(RemoteProfile(id="123", email="a@b.com"), SyncPolicy())
        >>> result.persisted
        True
    """

    def __init__(
        self,
        user_store: UserStore,
        authenticator: SessionAuthenticator,
        group_directory: GroupDirectory,
    ):
        self.user_store = user_store
        self.authenticator = authenticator
        self.group_directory = group_directory

    def sync(self, profile: RemoteProfile, policy: SyncPolicy) -> SyncResult:
        """
        Map the profile onto a member record and apply the policy.

        Args:
            profile: Verified profile from the identity provider
            policy: Whether to persist and which groups to enroll into

        Returns:
            SyncResult with the mapped record and whether it was saved

        Raises:
            PersistenceFailure: If the store rejects the save
        """
        if not policy.create_record:
            record = self._resolve_record(profile)
            logger.debug(
                "Mapped provider profile without persisting",
                extra={"provider_uid": record.provider_uid},
            )
            return SyncResult(record=record, persisted=False)

        record = self._save_record(profile)
        self.authenticator.login_as(record)

        for group_code in policy.target_groups:
            self.group_directory.enroll_by_code(record, group_code)

        logger.info(
            f"Synced provider member {record.provider_uid} as member {record.id}",
            extra={
                "member_id": record.id,
                "provider_uid": record.provider_uid,
                "groups": list(policy.target_groups),
            },
        )
        return SyncResult(record=record, persisted=True)

    def _resolve_record(self, profile: RemoteProfile) -> LocalUserRecord:
        record = None
        if profile.email:
            record = self.user_store.find_by_email(profile.email)
        if record is None:
            record = LocalUserRecord()
        return apply_profile(record, profile)

    @retry(
        retry=retry_if_exception_type(DuplicateMemberError),
        stop=stop_after_attempt(2),
        reraise=True,
    )
    def _save_record(self, profile: RemoteProfile) -> LocalUserRecord:
        """
        Resolve and save the member, retrying once on an email collision.

        A collision means a concurrent first login created the member between
        our lookup and our insert; the retry finds that member by email and
        updates it instead.
        """
        record = self._resolve_record(profile)
        try:
            return self.user_store.save(record)
        except DuplicateMemberError as e:
            logger.warning(
                f"Member email collision, re-resolving: {e}",
                extra={"error_type": "duplicate_member", "provider_uid": record.provider_uid},
            )
            raise
