"""
Test suite for ownership and role authorization rules.

System role: Verification of the pure access decision functions
"""

import uuid

import pytest

from docvault.core.authorization import (
    PERMISSION_DENIED_MESSAGE,
    UserRole,
    ensure_allowed,
    has_role,
    is_allowed,
)
from docvault.core.exceptions import ForbiddenError


class TestIsAllowed:
    """Test suite for is_allowed."""

    def test_is_allowed_should_admit_owner(self) -> None:
        owner_id = uuid.uuid4()

        assert is_allowed(owner_id, UserRole.VIEWER, owner_id) is True

    def test_is_allowed_should_admit_admin_for_foreign_resource(self) -> None:
        assert is_allowed(uuid.uuid4(), UserRole.ADMIN, uuid.uuid4()) is True

    @pytest.mark.parametrize("role", [UserRole.EDITOR, UserRole.VIEWER])
    def test_is_allowed_should_deny_non_owner_without_admin(self, role: UserRole) -> None:
        assert is_allowed(uuid.uuid4(), role, uuid.uuid4()) is False

    def test_is_allowed_should_compare_ids_across_str_and_uuid(self) -> None:
        owner_id = uuid.uuid4()

        assert is_allowed(str(owner_id), "EDITOR", owner_id) is True

    def test_is_allowed_should_accept_role_as_plain_string(self) -> None:
        assert is_allowed(uuid.uuid4(), "ADMIN", uuid.uuid4()) is True


class TestEnsureAllowed:
    """Test suite for ensure_allowed."""

    def test_ensure_allowed_should_raise_forbidden_with_fixed_message(self) -> None:
        # Act & Assert
        with pytest.raises(ForbiddenError) as exc_info:
            ensure_allowed(uuid.uuid4(), UserRole.EDITOR, uuid.uuid4())

        assert exc_info.value.message == PERMISSION_DENIED_MESSAGE

    def test_ensure_allowed_should_pass_silently_for_owner(self) -> None:
        owner_id = uuid.uuid4()

        ensure_allowed(owner_id, UserRole.EDITOR, owner_id)


class TestHasRole:
    """Test suite for has_role."""

    def test_has_role_should_match_member_role(self) -> None:
        assert has_role(UserRole.EDITOR, [UserRole.ADMIN, UserRole.EDITOR]) is True

    def test_has_role_should_reject_missing_role(self) -> None:
        assert has_role(UserRole.VIEWER, [UserRole.ADMIN, UserRole.EDITOR]) is False

    def test_has_role_should_accept_string_role(self) -> None:
        assert has_role("ADMIN", [UserRole.ADMIN]) is True
