"""
Common response models and utilities.

Generic response wrappers, error schemas and shared listing parameters.

Dependencies: pydantic
System role: Common API response structures
"""

import enum
import math
from typing import Generic, TypeVar

from pydantic import BaseModel, Field, model_validator

T = TypeVar("T")


class SortOrder(str, enum.Enum):
    """Sort direction for listings (applied to updated_at)."""

    ASC = "ASC"
    DESC = "DESC"


class SimpleMessageResponse(BaseModel):
    """Plain acknowledgement message."""

    message: str


class ErrorResponse(BaseModel):
    """Error response schema."""

    success: bool = False
    error: str = Field(description="Error message")
    details: dict | None = Field(default=None, description="Additional error context")


class PaginatedResult(BaseModel, Generic[T]):
    """One page of a filtered listing plus totals for the whole filter."""

    items: list[T]
    total_count: int
    total_pages: int

    @classmethod
    def build(cls, items: list[T], total_count: int, limit: int) -> "PaginatedResult[T]":
        """Compute total_pages as ceil(total_count / limit)."""
        return cls(
            items=items,
            total_count=total_count,
            total_pages=math.ceil(total_count / limit) if limit else 0,
        )


class ListQuery(BaseModel):
    """
    Pagination, ordering and soft-delete inclusion shared by all listings.

    include_deleted=False returns live rows only; include_deleted=True returns
    live and deleted rows; only_deleted=True returns deleted rows only.
    """

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    sort_order: SortOrder = SortOrder.DESC
    include_deleted: bool = False
    only_deleted: bool = False

    @model_validator(mode="after")
    def _only_deleted_implies_include(self) -> "ListQuery":
        if self.only_deleted:
            self.include_deleted = True
        return self

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

