"""
Complaint statistics schemas.
"""

from __future__ import annotations

from pydantic import Field

from complaint_engine.models.base.enums import ComplaintCategory
from complaint_engine.schemas.common.base import BaseSchema

__all__ = ["ComplaintStats", "CategoryCount"]


class ComplaintStats(BaseSchema):
    """Counts per status plus the mean feedback rating."""

    total: int = 0
    pending: int = 0
    assigned: int = 0
    resolved: int = 0
    closed: int = 0
    escalated: int = 0
    final_resolution: int = 0
    avg_rating: float = Field(default=0.0, description="0.0 when no feedback has been given")


class CategoryCount(BaseSchema):
    category: ComplaintCategory
    count: int = Field(..., ge=0)
