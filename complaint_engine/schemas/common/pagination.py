"""
Pagination schemas for page-based listing.
"""

from __future__ import annotations

import math
from typing import Generic, List, TypeVar

from pydantic import Field, ValidationInfo, field_validator

from complaint_engine.config.settings import get_settings
from complaint_engine.schemas.common.base import BaseSchema, context_settings

T = TypeVar("T")

__all__ = [
    "PaginationParams",
    "PaginatedResponse",
]


class PaginationParams(BaseSchema):
    """Pagination query parameters."""

    page: int = Field(
        default=1,
        ge=1,
        description="Page number (1-indexed)",
    )
    limit: int = Field(
        default_factory=lambda: get_settings().DEFAULT_PAGE_SIZE,
        ge=1,
        description="Items per page",
    )

    @field_validator("limit")
    @classmethod
    def validate_limit(cls, v: int, info: ValidationInfo) -> int:
        """Limit is capped by MAX_PAGE_SIZE of the context settings."""
        max_size = context_settings(info).MAX_PAGE_SIZE
        if v > max_size:
            raise ValueError(f"Page size must be between 1 and {max_size}")
        return v

    @property
    def offset(self) -> int:
        """Calculate offset for database queries."""
        return (self.page - 1) * self.limit


class PaginatedResponse(BaseSchema, Generic[T]):
    """Generic paginated response."""

    items: List[T] = Field(..., description="List of items")
    total_count: int = Field(..., ge=0, description="Total number of matching items")
    page: int = Field(..., ge=1, description="Current page number")
    total_pages: int = Field(..., ge=0, description="Total number of pages")
    limit: int = Field(..., ge=1, description="Items per page")

    @classmethod
    def create(
        cls,
        items: List[T],
        total_count: int,
        page: int,
        limit: int,
    ) -> "PaginatedResponse[T]":
        """
        Create paginated response with calculated page count.

        Args:
            items: List of items for current page.
            total_count: Total number of items across all pages.
            page: Current page number.
            limit: Number of items per page.
        """
        return cls(
            items=items,
            total_count=total_count,
            page=page,
            total_pages=math.ceil(total_count / limit) if total_count else 0,
            limit=limit,
        )
