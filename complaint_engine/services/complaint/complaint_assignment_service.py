"""
Complaint assignment service: hand a complaint to an agency, then to staff.
"""

from pydantic import ValidationError as PydanticValidationError

from complaint_engine.core.exceptions import ResourceNotFoundError
from complaint_engine.models.base.enums import UserRole
from complaint_engine.schemas.complaint.complaint_actions import AssignAgencyRequest, AssignStaffRequest
from complaint_engine.schemas.complaint.complaint_response import ComplaintDetail
from complaint_engine.schemas.principal import Principal
from complaint_engine.services.base.authorization_service import ComplaintAction
from complaint_engine.services.base.service_result import ServiceResult
from complaint_engine.services.complaint.complaint_transition_service import ComplaintTransitionService
from complaint_engine.services.complaint.complaint_workflow import AssignAgency, AssignStaff

AGENCY_ROLES = (UserRole.DEPARTMENT_ADMIN, UserRole.MAINTENANCE_STAFF)


class ComplaintAssignmentService(ComplaintTransitionService):
    """
    Assignment transitions.

    Agencies are approved departmentAdmin or maintenanceStaff users; staff
    are approved maintenanceStaff users. A complaint must have an agency
    before staff can be attached.
    """

    def assign_to_agency(
        self,
        principal: Principal,
        complaint_id: str,
        agency_id: str,
    ) -> ServiceResult[ComplaintDetail]:
        """Move a pending complaint to assigned under the given agency."""
        operation = "assign complaint to agency"
        try:
            request = AssignAgencyRequest(agency_id=agency_id)
        except PydanticValidationError as e:
            return self._handle_exception(e, operation, complaint_id)

        def build_event(snapshot):
            agency = self.user_repo.find_approved(request.agency_id, roles=AGENCY_ROLES)
            if agency is None:
                raise ResourceNotFoundError("Agency", request.agency_id)
            return AssignAgency(
                actor_id=principal.user_id,
                agency_id=agency.id,
                agency_name=agency.name,
                at=self.now(),
            )

        return self.run_transition(
            principal,
            complaint_id,
            ComplaintAction.ASSIGN_AGENCY,
            AssignAgency,
            build_event,
            operation,
            success_message="Complaint assigned successfully",
        )

    def assign_to_staff(
        self,
        principal: Principal,
        complaint_id: str,
        staff_id: str,
    ) -> ServiceResult[ComplaintDetail]:
        """Attach a staff member to an assigned complaint; status stays assigned."""
        operation = "assign complaint to staff"
        try:
            request = AssignStaffRequest(staff_id=staff_id)
        except PydanticValidationError as e:
            return self._handle_exception(e, operation, complaint_id)

        def build_event(snapshot):
            staff = self.user_repo.find_approved(request.staff_id, roles=(UserRole.MAINTENANCE_STAFF,))
            if staff is None:
                raise ResourceNotFoundError("Staff", request.staff_id)
            return AssignStaff(
                actor_id=principal.user_id,
                staff_id=staff.id,
                staff_name=staff.name,
                at=self.now(),
            )

        return self.run_transition(
            principal,
            complaint_id,
            ComplaintAction.ASSIGN_STAFF,
            AssignStaff,
            build_event,
            operation,
            success_message="Complaint assigned to staff successfully",
        )
