"""
Complaint resolution service.
"""

from pydantic import ValidationError as PydanticValidationError

from complaint_engine.schemas.complaint.complaint_actions import ResolveRequest
from complaint_engine.schemas.complaint.complaint_response import ComplaintDetail
from complaint_engine.schemas.principal import Principal
from complaint_engine.services.base.authorization_service import ComplaintAction
from complaint_engine.services.base.service_result import ServiceResult
from complaint_engine.services.complaint.complaint_transition_service import ComplaintTransitionService
from complaint_engine.services.complaint.complaint_workflow import Resolve


class ComplaintResolutionService(ComplaintTransitionService):

    def resolve(
        self,
        principal: Principal,
        complaint_id: str,
        resolution_notes: str,
    ) -> ServiceResult[ComplaintDetail]:
        """
        Mark an assigned complaint resolved and ask the reporter for feedback.

        Allowed for the assigned maintenance staff or agency, the
        department's admin and super admins.
        """
        operation = "resolve complaint"
        try:
            request = ResolveRequest(resolution_notes=resolution_notes)
        except PydanticValidationError as e:
            return self._handle_exception(e, operation, complaint_id)

        def build_event(snapshot):
            return Resolve(actor_id=principal.user_id, notes=request.resolution_notes, at=self.now())

        return self.run_transition(
            principal,
            complaint_id,
            ComplaintAction.RESOLVE,
            Resolve,
            build_event,
            operation,
            success_message="Complaint resolved successfully",
        )
