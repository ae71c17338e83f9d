"""
User ORM model.

Registry of the users that own documents and trigger ingestions. Credentials
are handled by the authentication gateway and are not stored here.

Dependencies: sqlalchemy, docvault.boundary.db.base, docvault.core.authorization
System role: User persistence and role source for requests
"""

from sqlalchemy import Boolean, Enum, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docvault.boundary.db.base import Base, SoftDeleteMixin, TimestampMixin, UUIDMixin
from docvault.core.authorization import UserRole


class UserModel(Base, UUIDMixin, TimestampMixin, SoftDeleteMixin):
    """
    User ORM model.

    Attributes:
        id: UUID primary key, also the X-User-Id the gateway forwards
        full_name: Display name
        email: Unique contact address
        role: ADMIN, EDITOR or VIEWER (new users start as VIEWER)
        is_active: False once the user is deleted
        created_at / updated_at / deleted_at: Lifecycle timestamps (UTC)

    Relationships:
        documents: DocumentModel rows owned by this user
    """

    __tablename__ = "users"
    __table_args__ = (Index("idx_users_role", "role"),)

    full_name: Mapped[str] = mapped_column(String(150), nullable=False)

    email: Mapped[str] = mapped_column(String(150), nullable=False, unique=True)

    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, native_enum=False, length=50),
        nullable=False,
        default=UserRole.VIEWER,
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    documents = relationship("DocumentModel", back_populates="owner")
