from complaint_engine.repositories.complaint.complaint_analytics_repository import ComplaintAnalyticsRepository
from complaint_engine.repositories.complaint.complaint_repository import (
    ComplaintRepository,
    build_complaint_conditions,
)
from complaint_engine.repositories.complaint.complaint_sequence_repository import ComplaintSequenceRepository

__all__ = [
    "ComplaintAnalyticsRepository",
    "ComplaintRepository",
    "ComplaintSequenceRepository",
    "build_complaint_conditions",
]
