"""Pydantic models for provider endpoints."""

from pydantic import BaseModel, Field

from src.fbconnect.sync.models import LocalUserRecord


class ProviderMemberResponse(BaseModel):
    """Response model for the current provider member endpoint."""

    member: LocalUserRecord | None = Field(None, description="Member synced on this request, if any")
    persisted: bool = Field(False, description="Whether the member was saved and logged in")

    class Config:
        """Pydantic config."""

        json_schema_extra = {
            "example": {
                "member": {
                    "id": "7d3f0c1e-3b0a-4c44-9e4b-1f6f7c1b2a90",
                    "email": "a@b.com",
                    "first_name": "A",
                    "surname": "",
                    "provider_link": "",
                    "provider_uid": "123",
                    "provider_timezone": "",
                },
                "persisted": True,
            }
        }


class PermissionsResponse(BaseModel):
    """Response model for the login button permissions endpoint."""

    permissions: list[str] = Field(description="Extended permissions to request")
    scope: str = Field(description="Comma-joined permissions for the login button")


class ProviderUrlResponse(BaseModel):
    """Response model for login/logout URL endpoints."""

    url: str
