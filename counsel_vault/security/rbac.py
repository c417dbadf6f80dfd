"""Role-based access control for audit review. Record content access is decided by AccessControlGuard."""

from typing import Optional

from counsel_vault.security.exceptions import AuthorizationError
from counsel_vault.security.identity import Role

SEARCH_AUDIT_TRAIL = "search_audit_trail"
VIEW_RECORD_METADATA = "view_record_metadata"

# Permission matrix:
# Role              Search audit  View record metadata
# ADMIN             ✓             ✓
# COUNSELOR         ✗             ✗
# HOMEROOM_TEACHER  ✗             ✗
# STUDENT           ✗             ✗
#
# No action here decrypts content.

_ACTION_PERMISSIONS: dict[tuple[Role, str], bool] = {
    (Role.ADMIN, SEARCH_AUDIT_TRAIL): True,
    (Role.ADMIN, VIEW_RECORD_METADATA): True,
    (Role.COUNSELOR, SEARCH_AUDIT_TRAIL): False,
    (Role.COUNSELOR, VIEW_RECORD_METADATA): False,
    (Role.HOMEROOM_TEACHER, SEARCH_AUDIT_TRAIL): False,
    (Role.HOMEROOM_TEACHER, VIEW_RECORD_METADATA): False,
    (Role.STUDENT, SEARCH_AUDIT_TRAIL): False,
    (Role.STUDENT, VIEW_RECORD_METADATA): False,
}


class RBACService:
    """Check permission for role and action. Raise AuthorizationError if invalid."""

    def check_permission(self, role: Optional[Role], action: str) -> None:
        """Raises AuthorizationError if role does not have permission for action."""
        if role is None:
            raise AuthorizationError(f"Unauthenticated caller may not perform '{action}'")
        key = (role, action)
        if key not in _ACTION_PERMISSIONS or not _ACTION_PERMISSIONS[key]:
            raise AuthorizationError(
                f"Role {role.value} does not have permission for action '{action}'"
            )
