"""
Core complaint service: submission, retrieval, listing and the category catalogue.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.orm import Session

from complaint_engine.config.settings import Settings, get_settings
from complaint_engine.core.constants import (
    COMPLAINT_CATEGORIES,
    COMPLAINT_NUMBER_PREFIX,
    SUBMISSION_NOTE,
    subcategories_for,
)
from complaint_engine.core.exceptions import ResourceNotFoundError, ValidationError
from complaint_engine.models.base.base_model import utc_now
from complaint_engine.models.base.enums import (
    ComplaintCategory,
    ComplaintSortField,
    ComplaintStatus,
    SortOrder,
    UserRole,
)
from complaint_engine.models.complaint.complaint import Complaint
from complaint_engine.repositories.complaint.complaint_repository import ComplaintRepository
from complaint_engine.repositories.complaint.complaint_sequence_repository import ComplaintSequenceRepository
from complaint_engine.repositories.resource.resource_repository import ResourceRepository
from complaint_engine.repositories.user.user_repository import UserRepository
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
from complaint_engine.schemas.principal import Principal
from complaint_engine.services.base.authorization_service import (
    ComplaintAction,
    ensure_can_view,
    ensure_role_allowed,
    scope_filters,
)
from complaint_engine.services.base.base_service import BaseService
from complaint_engine.services.base.notification_dispatcher import (
    NotificationDispatcher,
    get_notification_dispatcher,
)
from complaint_engine.services.base.service_result import ServiceResult
from complaint_engine.services.complaint.complaint_workflow import submission_effects


def format_complaint_number(issued_at: datetime, sequence: int) -> str:
    """CMP-YY-MM-NNNN for the month the complaint was issued in."""
    return f"{COMPLAINT_NUMBER_PREFIX}-{issued_at:%y}-{issued_at:%m}-{sequence:04d}"


class ComplaintService(BaseService[ComplaintRepository]):
    """
    High-level orchestration for complaint intake and queries.

    Lifecycle transitions live in the assignment, resolution, feedback and
    escalation services.
    """

    def __init__(
        self,
        complaint_repo: ComplaintRepository,
        sequence_repo: ComplaintSequenceRepository,
        user_repo: UserRepository,
        resource_repo: ResourceRepository,
        db_session: Session,
        dispatcher: Optional[NotificationDispatcher] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(complaint_repo, db_session)
        self.complaint_repo = complaint_repo
        self.sequence_repo = sequence_repo
        self.user_repo = user_repo
        self.resource_repo = resource_repo
        self.dispatcher = dispatcher or get_notification_dispatcher()
        self.settings = settings or get_settings()

    def now(self) -> datetime:
        return utc_now()

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def submit_complaint(
        self,
        principal: Principal,
        payload: Union[ComplaintCreate, Dict[str, Any]],
    ) -> ServiceResult[ComplaintDetail]:
        """
        Create a pending complaint and notify the department that handles it.

        Misc complaints go to approved super admins; other categories go to
        the approved department admins of that category.
        """
        try:
            ensure_role_allowed(principal, ComplaintAction.SUBMIT)
            raw = payload.model_dump() if isinstance(payload, ComplaintCreate) else payload
            data = ComplaintCreate.model_validate(raw, context={"settings": self.settings})

            resource = self.resource_repo.resolve_resource(data.resource_id)
            if resource is None:
                raise ResourceNotFoundError("Resource", data.resource_id)
            if not resource.is_active:
                raise ValidationError(
                    "Complaints can only be raised against active resources",
                    field_errors={"resource_id": ["Resource is not active"]},
                )

            now = self.now()
            number = format_complaint_number(now, self.sequence_repo.next_value(now.year, now.month))

            complaint = Complaint(
                complaint_number=number,
                reporter_id=principal.user_id,
                resource_id=resource.id,
                category=data.category,
                subcategory=data.subcategory,
                description=data.description,
                images=list(data.images),
                status=ComplaintStatus.PENDING,
            )
            self.complaint_repo.create_complaint(complaint, principal.user_id, SUBMISSION_NOTE, now)

            audience = self._submission_audience(data.category)
            self.db.commit()

            detail = ComplaintDetail.model_validate(complaint)

        except Exception as e:
            self._rollback()
            return self._handle_exception(e, "submit complaint", additional_context={"actor_id": principal.user_id})

        self._logger.info(
            f"Complaint {detail.complaint_number} submitted",
            extra={
                "complaint_id": detail.id,
                "complaint_number": detail.complaint_number,
                "actor_id": principal.user_id,
                "operation": "submit complaint",
            },
        )
        self.dispatcher.dispatch(
            submission_effects(detail.id, detail.complaint_number, detail.category, audience)
        )
        return ServiceResult.success(detail, message="Complaint submitted successfully")

    def _submission_audience(self, category: ComplaintCategory) -> List[str]:
        if category == ComplaintCategory.MISC:
            users = self.user_repo.find_approved_by_role(UserRole.SUPER_ADMIN)
        else:
            users = self.user_repo.find_approved_by_role(UserRole.DEPARTMENT_ADMIN, department=category)
        return [user.id for user in users]

    # -------------------------------------------------------------------------
    # Retrieval
    # -------------------------------------------------------------------------

    def get_complaint(self, principal: Principal, complaint_id: str) -> ServiceResult[ComplaintDetail]:
        """Fetch one complaint by id or number, subject to the caller's view rights."""
        try:
            complaint = self.complaint_repo.get_by_reference(complaint_id)
            ensure_can_view(principal, complaint)
            return ServiceResult.success(ComplaintDetail.model_validate(complaint))
        except Exception as e:
            return self._handle_exception(e, "get complaint", complaint_id)

    def get_history(
        self,
        principal: Principal,
        complaint_id: str,
    ) -> ServiceResult[List[ComplaintHistoryEntry]]:
        """Ordered timeline of a complaint."""
        try:
            complaint = self.complaint_repo.get_by_reference(complaint_id)
            ensure_can_view(principal, complaint)
            entries = [ComplaintHistoryEntry.model_validate(entry) for entry in complaint.history]
            return ServiceResult.success(entries, metadata={"count": len(entries)})
        except Exception as e:
            return self._handle_exception(e, "get complaint history", complaint_id)

    def list_complaints(
        self,
        principal: Principal,
        filters: Optional[Union[ComplaintFilterParams, Dict[str, Any]]] = None,
        page: int = 1,
        limit: Optional[int] = None,
        sort_field: Union[ComplaintSortField, str] = ComplaintSortField.CREATED_AT,
        sort_order: Union[SortOrder, str] = SortOrder.DESC,
    ) -> ServiceResult[PaginatedComplaints]:
        """
        Page through complaints visible to the principal.

        Role scoping is applied on top of the requested filters; role-forced
        fields cannot be widened by the caller.
        """
        try:
            params_data: Dict[str, Any] = {
                "page": page,
                "limit": self.settings.DEFAULT_PAGE_SIZE if limit is None else limit,
                "sort_field": sort_field,
                "sort_order": sort_order,
            }
            params = ComplaintListParams.model_validate(params_data, context={"settings": self.settings})

            requested = self._coerce_filters(filters)
            scoped = scope_filters(principal, requested)

            complaints, total = self.complaint_repo.list_complaints(
                scoped,
                offset=params.offset,
                limit=params.limit,
                sort_field=params.sort_field,
                sort_order=params.sort_order,
            )

            result = PaginatedComplaints.create(
                items=[ComplaintListItem.model_validate(c) for c in complaints],
                total_count=total,
                page=params.page,
                limit=params.limit,
            )
            return ServiceResult.success(result)

        except Exception as e:
            return self._handle_exception(e, "list complaints", additional_context={"actor_id": principal.user_id})

    @staticmethod
    def _coerce_filters(
        filters: Optional[Union[ComplaintFilterParams, Dict[str, Any]]],
    ) -> ComplaintFilterParams:
        if filters is None:
            return ComplaintFilterParams()
        if isinstance(filters, ComplaintFilterParams):
            return filters
        return ComplaintFilterParams.model_validate(filters)

    # -------------------------------------------------------------------------
    # Category catalogue
    # -------------------------------------------------------------------------

    def list_categories(self) -> ServiceResult[Dict[str, List[str]]]:
        catalogue = {category.value: list(subcategories) for category, subcategories in COMPLAINT_CATEGORIES.items()}
        return ServiceResult.success(catalogue)

    def list_subcategories(self, category: str) -> ServiceResult[List[str]]:
        try:
            key = ComplaintCategory(category)
        except ValueError:
            return ServiceResult.validation_failure(
                f"Invalid category '{category}'",
                field="category",
                details={"allowed": [c.value for c in ComplaintCategory]},
            )
        return ServiceResult.success(subcategories_for(key))
