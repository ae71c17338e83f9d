"""
User domain models and schemas.

Registration, role change, listing filters and responses for the user
registry, plus the "my documents" listing.

Dependencies: pydantic, docvault.core.authorization
System role: User API contracts
"""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from docvault.core.authorization import UserRole
from docvault.models.common import ListQuery, SortOrder

UserField = Literal[
    "id",
    "full_name",
    "email",
    "role",
    "is_active",
    "created_at",
    "updated_at",
    "deleted_at",
]

DEFAULT_USER_FIELDS: list[UserField] = ["id", "full_name", "email", "role"]

# Roles an admin may hand out; ADMIN is only ever bootstrapped
ASSIGNABLE_ROLES = (UserRole.EDITOR, UserRole.VIEWER)


class UserRegistration(BaseModel):
    """New user details; every new user starts as VIEWER."""

    full_name: str = Field(min_length=1, max_length=100, pattern=r"^[A-Za-z\s]+$")
    email: EmailStr = Field(max_length=100)


class UserRoleUpdate(BaseModel):
    """Role change requested by an admin."""

    role: UserRole

    @field_validator("role")
    @classmethod
    def _not_admin(cls, role: UserRole) -> UserRole:
        if role not in ASSIGNABLE_ROLES:
            raise ValueError(f"Role must be one of: {', '.join(r.value for r in ASSIGNABLE_ROLES)}")
        return role


class UserListFilters(ListQuery):
    """Filters, projection and pagination for user listings (admins are never listed)."""

    select: list[UserField] = Field(
        default_factory=lambda: list(DEFAULT_USER_FIELDS), min_length=1
    )
    full_name: str | None = Field(default=None, description="Case-insensitive name substring")
    email: str | None = Field(default=None, description="Case-insensitive email substring")
    role: list[UserRole] | None = Field(default=None, max_length=2)
    is_active: bool | None = None


class UserResponse(BaseModel):
    """User details returned to admins."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    full_name: str
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None


class CreateUserResponse(BaseModel):
    """Response schema for a registration."""

    id: uuid.UUID
    role: UserRole


class UserDocumentsQuery(BaseModel):
    """Pagination for a user's own live documents."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    sort_order: SortOrder = SortOrder.DESC

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
