"""
Ownership and role authorization rules.

Pure decision functions: no I/O, no side effects.

Dependencies: docvault.core.exceptions
System role: Resource ownership checks for documents and ingestions
"""

import enum
from collections.abc import Iterable
from uuid import UUID

from docvault.core.exceptions import ForbiddenError

PERMISSION_DENIED_MESSAGE = "You do not have permission to perform this action"


class UserRole(str, enum.Enum):
    """
    Requester roles.

    ADMIN: May act on any resource regardless of owner
    EDITOR: May upload and modify own documents, trigger ingestions
    VIEWER: Read-only access
    """

    ADMIN = "ADMIN"
    EDITOR = "EDITOR"
    VIEWER = "VIEWER"


def is_allowed(
    requester_id: UUID | str,
    requester_role: UserRole | str,
    resource_owner_id: UUID | str,
) -> bool:
    """
    Decide whether a requester may act on a resource.

    Args:
        requester_id: Identity of the caller
        requester_role: Role of the caller
        resource_owner_id: Owner of the resource being accessed

    Returns:
        bool: True if the requester owns the resource or is an ADMIN
    """
    if str(requester_id) == str(resource_owner_id):
        return True
    return str(getattr(requester_role, "value", requester_role)) == UserRole.ADMIN.value


def ensure_allowed(
    requester_id: UUID | str,
    requester_role: UserRole | str,
    resource_owner_id: UUID | str,
) -> None:
    """
    Raise ForbiddenError when is_allowed() denies access.

    Raises:
        ForbiddenError: Requester is neither the owner nor an ADMIN
    """
    if not is_allowed(requester_id, requester_role, resource_owner_id):
        raise ForbiddenError(
            PERMISSION_DENIED_MESSAGE,
            details={
                "requester_id": str(requester_id),
                "resource_owner_id": str(resource_owner_id),
            },
        )


def has_role(role: UserRole | str, allowed_roles: Iterable[UserRole]) -> bool:
    """Return True if the role is one of allowed_roles."""
    value = str(getattr(role, "value", role))
    return any(value == allowed.value for allowed in allowed_roles)
