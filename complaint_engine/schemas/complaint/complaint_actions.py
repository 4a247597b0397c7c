"""
Request bodies for lifecycle transitions.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator

from complaint_engine.schemas.common.base import BaseSchema

__all__ = [
    "AssignAgencyRequest",
    "AssignStaffRequest",
    "ResolveRequest",
    "FeedbackRequest",
    "FinalResolutionRequest",
]


class AssignAgencyRequest(BaseSchema):
    agency_id: str = Field(..., min_length=1, alias="agencyId")


class AssignStaffRequest(BaseSchema):
    staff_id: str = Field(..., min_length=1, alias="staffId")


class ResolveRequest(BaseSchema):
    resolution_notes: str = Field(..., min_length=1, max_length=2000, alias="resolutionNotes")


class FeedbackRequest(BaseSchema):
    """Reporter's verdict on a resolution."""

    rating: int = Field(..., ge=1, le=5, description="Satisfaction rating (1-5)")
    comment: Optional[str] = Field(default=None, max_length=1000)

    @field_validator("comment")
    @classmethod
    def blank_comment_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


class FinalResolutionRequest(BaseSchema):
    final_resolution: str = Field(..., min_length=1, max_length=2000, alias="resolution")
