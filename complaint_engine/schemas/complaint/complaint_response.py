"""
Complaint response schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from complaint_engine.models.base.enums import ComplaintCategory, ComplaintStatus
from complaint_engine.schemas.common.base import BaseResponseSchema, BaseSchema

__all__ = [
    "ComplaintHistoryEntry",
    "ComplaintListItem",
    "ComplaintDetail",
]


class ComplaintHistoryEntry(BaseSchema):
    """One row of a complaint's timeline."""

    sequence: int
    status: ComplaintStatus
    actor_id: str
    note: Optional[str] = None
    timestamp: datetime


class ComplaintListItem(BaseResponseSchema):
    """Summary row used by listings."""

    complaint_number: str
    reporter_id: str
    resource_id: str
    category: ComplaintCategory
    subcategory: str
    status: ComplaintStatus
    assigned_agency_id: Optional[str] = None
    assigned_staff_id: Optional[str] = None
    feedback_rating: Optional[int] = None


class ComplaintDetail(ComplaintListItem):
    """Full complaint record including its history."""

    description: str
    images: List[str] = Field(default_factory=list)

    assigned_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    resolution_notes: Optional[str] = None
    closed_at: Optional[datetime] = None

    feedback_comment: Optional[str] = None
    feedback_submitted_at: Optional[datetime] = None

    escalated_at: Optional[datetime] = None
    escalation_reason: Optional[str] = None
    appellate_authority_id: Optional[str] = None
    final_resolution: Optional[str] = None
    final_resolved_at: Optional[datetime] = None

    version: int
    history: List[ComplaintHistoryEntry] = Field(default_factory=list)
