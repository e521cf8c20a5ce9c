"""Permission scopes requested by the provider's login button."""

from collections.abc import Iterable

EMAIL_PERMISSION = "email"


class PermissionSetBuilder:
    """
    Builds the list of extended permissions to request at login.

    Members are keyed by email, so when member creation is enabled the
    `email` permission is always requested, whatever was configured.

    Example:
        >>> PermissionSetBuilder().build(["user_likes"], require_email=True)
        ['user_likes', 'email']
    """

    def build(self, configured_permissions: Iterable[str], require_email: bool) -> list[str]:
        """
        Deduplicate the configured scopes and add `email` when required.

        Args:
            configured_permissions: Scopes from configuration. Ordered inputs
                keep their order; sets are sorted so the output is stable.
            require_email: Whether the `email` scope must be requested

        Returns:
            Ordered list of unique scope names
        """
        if isinstance(configured_permissions, (set, frozenset)):
            configured_permissions = sorted(configured_permissions)

        permissions: list[str] = []
        for permission in configured_permissions:
            if permission and permission not in permissions:
                permissions.append(permission)

        if require_email and EMAIL_PERMISSION not in permissions:
            permissions.append(EMAIL_PERMISSION)

        return permissions

    def scope_string(self, configured_permissions: Iterable[str], require_email: bool) -> str:
        """Comma-joined scopes, as the login button's `perms` attribute expects."""
        return ",".join(self.build(configured_permissions, require_email))
