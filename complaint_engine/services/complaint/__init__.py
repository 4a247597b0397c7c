"""
Complaint service layer.

- **Intake & queries**: submission, retrieval, history, listing, categories
- **Lifecycle**: assignment, resolution, feedback, escalation
- **Analytics**: status counts and category distribution

All services return ServiceResult and never raise for expected failures.
"""

from complaint_engine.services.complaint.complaint_analytics_service import ComplaintAnalyticsService
from complaint_engine.services.complaint.complaint_assignment_service import ComplaintAssignmentService
from complaint_engine.services.complaint.complaint_escalation_service import (
    AppellateAuthoritySelector,
    ComplaintEscalationService,
)
from complaint_engine.services.complaint.complaint_feedback_service import ComplaintFeedbackService
from complaint_engine.services.complaint.complaint_resolution_service import ComplaintResolutionService
from complaint_engine.services.complaint.complaint_service import ComplaintService
from complaint_engine.services.complaint.complaint_transition_service import ComplaintTransitionService

__all__ = [
    "AppellateAuthoritySelector",
    "ComplaintAnalyticsService",
    "ComplaintAssignmentService",
    "ComplaintEscalationService",
    "ComplaintFeedbackService",
    "ComplaintResolutionService",
    "ComplaintService",
    "ComplaintTransitionService",
]

# Service registry for factory lookups
SERVICE_REGISTRY = {
    "complaint": ComplaintService,
    "assignment": ComplaintAssignmentService,
    "resolution": ComplaintResolutionService,
    "feedback": ComplaintFeedbackService,
    "escalation": ComplaintEscalationService,
    "analytics": ComplaintAnalyticsService,
}


def get_service(service_name: str):
    """
    Get service class by name.

    Raises:
        KeyError: If service name is not found
    """
    return SERVICE_REGISTRY[service_name]
