"""
Complaint schemas package.
"""

from complaint_engine.schemas.complaint.complaint_actions import (
    AssignAgencyRequest,
    AssignStaffRequest,
    FeedbackRequest,
    FinalResolutionRequest,
    ResolveRequest,
)
from complaint_engine.schemas.complaint.complaint_analytics import CategoryCount, ComplaintStats
from complaint_engine.schemas.complaint.complaint_base import ComplaintCreate
from complaint_engine.schemas.complaint.complaint_filters import (
    ComplaintFilterParams,
    ComplaintListParams,
    PaginatedComplaints,
)
from complaint_engine.schemas.complaint.complaint_response import (
    ComplaintDetail,
    ComplaintHistoryEntry,
    ComplaintListItem,
)

__all__ = [
    "AssignAgencyRequest",
    "AssignStaffRequest",
    "CategoryCount",
    "ComplaintCreate",
    "ComplaintDetail",
    "ComplaintFilterParams",
    "ComplaintHistoryEntry",
    "ComplaintListItem",
    "ComplaintListParams",
    "ComplaintStats",
    "FeedbackRequest",
    "FinalResolutionRequest",
    "PaginatedComplaints",
    "ResolveRequest",
]
