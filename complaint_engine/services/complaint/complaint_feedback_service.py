"""
Complaint feedback service: close or escalate based on the reporter's rating.
"""

from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from complaint_engine.schemas.complaint.complaint_actions import FeedbackRequest
from complaint_engine.schemas.complaint.complaint_response import ComplaintDetail
from complaint_engine.schemas.principal import Principal
from complaint_engine.services.base.authorization_service import ComplaintAction
from complaint_engine.services.base.service_result import ServiceResult
from complaint_engine.services.complaint.complaint_escalation_service import AppellateAuthoritySelector
from complaint_engine.services.complaint.complaint_transition_service import ComplaintTransitionService
from complaint_engine.services.complaint.complaint_workflow import SubmitFeedback


class ComplaintFeedbackService(ComplaintTransitionService):
    """
    Reporter feedback on a resolved complaint.

    Ratings at or above FEEDBACK_CLOSE_THRESHOLD close the complaint; lower
    ratings escalate it to an appellate authority.
    """

    def submit_feedback(
        self,
        principal: Principal,
        complaint_id: str,
        rating: int,
        comment: Optional[str] = None,
    ) -> ServiceResult[ComplaintDetail]:
        operation = "submit feedback"
        try:
            request = FeedbackRequest(rating=rating, comment=comment)
        except PydanticValidationError as e:
            return self._handle_exception(e, operation, complaint_id)

        threshold = self.settings.FEEDBACK_CLOSE_THRESHOLD
        selector = AppellateAuthoritySelector(self.user_repo, self.complaint_repo, self.settings)

        def build_event(snapshot):
            authority_id = selector.select() if request.rating < threshold else None
            return SubmitFeedback(
                actor_id=principal.user_id,
                rating=request.rating,
                comment=request.comment,
                at=self.now(),
                close_threshold=threshold,
                default_escalation_reason=self.settings.DEFAULT_ESCALATION_REASON,
                appellate_authority_id=authority_id,
            )

        message = (
            "Feedback submitted and complaint closed"
            if request.rating >= threshold
            else "Feedback submitted and complaint escalated"
        )
        return self.run_transition(
            principal,
            complaint_id,
            ComplaintAction.SUBMIT_FEEDBACK,
            SubmitFeedback,
            build_event,
            operation,
            success_message=message,
        )
