"""
Escalation handling: appellate authority selection and final resolution.
"""

from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from complaint_engine.config.logging import get_logger
from complaint_engine.config.settings import Settings
from complaint_engine.models.base.enums import UserRole
from complaint_engine.repositories.complaint.complaint_repository import ComplaintRepository
from complaint_engine.repositories.user.user_repository import UserRepository
from complaint_engine.schemas.complaint.complaint_actions import FinalResolutionRequest
from complaint_engine.schemas.complaint.complaint_response import ComplaintDetail
from complaint_engine.schemas.principal import Principal
from complaint_engine.services.base.authorization_service import ComplaintAction
from complaint_engine.services.base.service_result import ServiceResult
from complaint_engine.services.complaint.complaint_transition_service import ComplaintTransitionService
from complaint_engine.services.complaint.complaint_workflow import Finalize

logger = get_logger(__name__)


class AppellateAuthoritySelector:
    """
    Picks the super admin who receives an escalated complaint.

    Strategies:
        first_approved: oldest approved super admin
        configured: APPELLATE_AUTHORITY_ID, falling back to first_approved
            when that user is not an approved super admin
        round_robin: rotate through approved super admins by the number of
            complaints already handed to an authority
    """

    def __init__(
        self,
        user_repo: UserRepository,
        complaint_repo: ComplaintRepository,
        settings: Settings,
    ):
        self.user_repo = user_repo
        self.complaint_repo = complaint_repo
        self.settings = settings

    def select(self) -> Optional[str]:
        strategy = self.settings.APPELLATE_AUTHORITY_STRATEGY

        if strategy == "configured" and self.settings.APPELLATE_AUTHORITY_ID:
            authority = self.user_repo.find_approved(
                self.settings.APPELLATE_AUTHORITY_ID,
                roles=(UserRole.SUPER_ADMIN,),
            )
            if authority is not None:
                return authority.id
            logger.warning(
                f"Configured appellate authority {self.settings.APPELLATE_AUTHORITY_ID} "
                f"is not an approved superAdmin, falling back to first approved"
            )

        authorities = self.user_repo.find_approved_by_role(UserRole.SUPER_ADMIN)
        if not authorities:
            logger.warning("No approved superAdmin available as appellate authority")
            return None

        if strategy == "round_robin":
            index = self.complaint_repo.count_with_appellate_authority() % len(authorities)
            return authorities[index].id

        return authorities[0].id


class ComplaintEscalationService(ComplaintTransitionService):

    def finalize(
        self,
        principal: Principal,
        complaint_id: str,
        final_resolution: str,
    ) -> ServiceResult[ComplaintDetail]:
        """Record the appellate authority's decision on an escalated complaint."""
        operation = "finalize complaint"
        try:
            request = FinalResolutionRequest(final_resolution=final_resolution)
        except PydanticValidationError as e:
            return self._handle_exception(e, operation, complaint_id)

        def build_event(snapshot):
            return Finalize(
                actor_id=principal.user_id,
                resolution=request.final_resolution,
                at=self.now(),
            )

        return self.run_transition(
            principal,
            complaint_id,
            ComplaintAction.FINALIZE,
            Finalize,
            build_event,
            operation,
            success_message="Final resolution provided successfully",
        )
