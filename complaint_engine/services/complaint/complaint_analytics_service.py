"""
Complaint statistics scoped to what the caller may see.
"""

from typing import Any, Dict, List, Optional, Union

from sqlalchemy.orm import Session

from complaint_engine.models.base.enums import ComplaintStatus
from complaint_engine.repositories.complaint.complaint_analytics_repository import ComplaintAnalyticsRepository
from complaint_engine.schemas.complaint.complaint_analytics import CategoryCount, ComplaintStats
from complaint_engine.schemas.complaint.complaint_filters import ComplaintFilterParams
from complaint_engine.schemas.principal import Principal
from complaint_engine.services.base.authorization_service import scope_filters
from complaint_engine.services.base.base_service import BaseService
from complaint_engine.services.base.service_result import ServiceResult

STATUS_FIELDS = {
    ComplaintStatus.PENDING: "pending",
    ComplaintStatus.ASSIGNED: "assigned",
    ComplaintStatus.RESOLVED: "resolved",
    ComplaintStatus.CLOSED: "closed",
    ComplaintStatus.ESCALATED: "escalated",
    ComplaintStatus.FINAL_RESOLUTION: "final_resolution",
}


class ComplaintAnalyticsService(BaseService[ComplaintAnalyticsRepository]):
    """Status counts, average rating and category distribution."""

    def __init__(self, repository: ComplaintAnalyticsRepository, db_session: Session):
        super().__init__(repository, db_session)

    def stats(
        self,
        principal: Principal,
        filters: Optional[Union[ComplaintFilterParams, Dict[str, Any]]] = None,
    ) -> ServiceResult[ComplaintStats]:
        try:
            scoped = scope_filters(principal, self._coerce_filters(filters))
            breakdown = self.repository.get_status_breakdown(scoped)
            avg_rating = self.repository.get_average_rating(scoped)

            counts = {field: breakdown.get(status, 0) for status, field in STATUS_FIELDS.items()}
            stats = ComplaintStats(
                total=sum(breakdown.values()),
                avg_rating=round(avg_rating, 2) if avg_rating is not None else 0.0,
                **counts,
            )
            return ServiceResult.success(stats)
        except Exception as e:
            return self._handle_exception(e, "get complaint statistics")

    def category_distribution(
        self,
        principal: Principal,
        filters: Optional[Union[ComplaintFilterParams, Dict[str, Any]]] = None,
    ) -> ServiceResult[List[CategoryCount]]:
        try:
            scoped = scope_filters(principal, self._coerce_filters(filters))
            rows = self.repository.get_category_distribution(scoped)
            return ServiceResult.success([CategoryCount(**row) for row in rows])
        except Exception as e:
            return self._handle_exception(e, "get category distribution")

    @staticmethod
    def _coerce_filters(filters) -> ComplaintFilterParams:
        if filters is None:
            return ComplaintFilterParams()
        if isinstance(filters, ComplaintFilterParams):
            return filters
        return ComplaintFilterParams.model_validate(filters)
