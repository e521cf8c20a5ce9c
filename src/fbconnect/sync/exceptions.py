"""Custom exceptions for member persistence."""


class PersistenceFailure(Exception):
    """Raised when the member store rejects a write."""

    pass


class DuplicateMemberError(PersistenceFailure):
    """Raised when a new member collides with an existing member's email."""

    def __init__(self, email: str):
        super().__init__(f"A member with email '{email}' already exists")
        self.email = email
