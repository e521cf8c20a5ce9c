"""Shared fixtures for identity sync tests."""

from unittest.mock import Mock

import pytest

from src.fbconnect.sync.adapter import IdentitySyncAdapter
from src.fbconnect.sync.models import RemoteProfile
from src.fbconnect.sync.stores import InMemoryGroupDirectory, InMemoryUserStore


@pytest.fixture
def user_store() -> InMemoryUserStore:
    """Empty in-memory member store."""
    return InMemoryUserStore()


@pytest.fixture
def group_directory() -> InMemoryGroupDirectory:
    """Empty in-memory group directory."""
    return InMemoryGroupDirectory()


@pytest.fixture
def authenticator() -> Mock:
    """Mock session authenticator recording login calls."""
    return Mock()


@pytest.fixture
def adapter(user_store, authenticator, group_directory) -> IdentitySyncAdapter:
    """Adapter wired to in-memory collaborators."""
    return IdentitySyncAdapter(user_store, authenticator, group_directory)


@pytest.fixture
def profile() -> RemoteProfile:
    """Profile with an email and a first name only."""
    return RemoteProfile(id="123", email="a@b.com", first_name="A")


@pytest.fixture
def full_profile() -> RemoteProfile:
    """Profile with every mapped field set."""
    return RemoteProfile.model_validate(
        {
            "id": "456",
            "email": "jane@example.com",
            "first_name": "Jane",
            "last_name": "Doe",
            "link": "https://www.facebook.com/jane.doe",
            "timezone": -5,
            "locale": "en_US",
        }
    )
