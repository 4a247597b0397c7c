"""
Complaint filtering and sorting schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from complaint_engine.models.base.enums import (
    ComplaintCategory,
    ComplaintSortField,
    ComplaintStatus,
    SortOrder,
)
from complaint_engine.schemas.common.base import BaseFilterSchema
from complaint_engine.schemas.common.pagination import PaginatedResponse, PaginationParams
from complaint_engine.schemas.complaint.complaint_response import ComplaintListItem

__all__ = [
    "ComplaintFilterParams",
    "ComplaintListParams",
    "PaginatedComplaints",
]


class ComplaintFilterParams(BaseFilterSchema):
    """
    Narrowing filters for complaint queries.

    ``date_from`` and ``date_to`` only take effect when both are given.
    """

    reporter_id: Optional[str] = Field(default=None, alias="userId")
    resource_id: Optional[str] = Field(default=None, alias="resourceId")
    category: Optional[ComplaintCategory] = None
    status: Optional[ComplaintStatus] = None
    assigned_staff_id: Optional[str] = Field(default=None, alias="assignedStaff")
    date_from: Optional[datetime] = Field(default=None, alias="startDate")
    date_to: Optional[datetime] = Field(default=None, alias="endDate")

    @property
    def has_date_range(self) -> bool:
        return self.date_from is not None and self.date_to is not None


class ComplaintListParams(PaginationParams):
    """Paging and ordering for complaint listings."""

    sort_field: ComplaintSortField = Field(default=ComplaintSortField.CREATED_AT, alias="sortBy")
    sort_order: SortOrder = Field(default=SortOrder.DESC, alias="sortOrder")


class PaginatedComplaints(PaginatedResponse[ComplaintListItem]):
    """Page of complaint summaries."""
