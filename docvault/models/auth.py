"""
Requester identity.

The authentication gateway verifies tokens upstream; this service only
receives the resulting identity.

Dependencies: pydantic, docvault.core.authorization
System role: Identity passed to ownership checks
"""

from uuid import UUID

from pydantic import BaseModel

from docvault.core.authorization import UserRole


class Requester(BaseModel):
    """Authenticated caller."""

    user_id: UUID
    role: UserRole
