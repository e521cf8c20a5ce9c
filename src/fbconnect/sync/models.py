"""Pydantic models for member records and sync outcomes."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RemoteProfile(BaseModel):
    """
    Normalized subset of the provider's `/me` response.

    Only `id` is guaranteed. The Graph API returns `timezone` as a number, so
    scalar values are coerced to their string form here.

    Example:
        >>> RemoteProfile.model_validate({"id": "123", "timezone": -5}).timezone
        '-5'
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    link: str | None = None
    timezone: str | None = None

    @field_validator("id", "email", "first_name", "last_name", "link", "timezone", mode="before")
    @classmethod
    def _coerce_scalar(cls, value):
        if isinstance(value, bool):
            return str(value).lower()
        if isinstance(value, (int, float)):
            return str(value)
        return value


class LocalUserRecord(BaseModel):
    """
    Local member record synced from a remote profile.

    Every field defaults to an empty string so templates and API consumers
    never have to branch on missing values. `id` is assigned by the store on
    first save.
    """

    id: str | None = None
    email: str = ""
    first_name: str = ""
    surname: str = ""
    provider_link: str = ""
    provider_uid: str = ""
    provider_timezone: str = ""


class GroupMembership(BaseModel):
    """Member enrolled into a group identified by its code."""

    model_config = ConfigDict(frozen=True)

    member_id: str
    group_code: str


class SyncPolicy(BaseModel):
    """Configuration-driven behaviour applied after a profile is mapped."""

    model_config = ConfigDict(frozen=True)

    create_record: bool = True
    target_groups: tuple[str, ...] = Field(default_factory=tuple)


class SyncResult(BaseModel):
    """Outcome of one sync: the mapped record and whether it was written."""

    record: LocalUserRecord
    persisted: bool
