"""
Aggregate queries over complaints: status counts, ratings and category spread.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from complaint_engine.core.exceptions import RepositoryError
from complaint_engine.models.base.enums import ComplaintCategory, ComplaintStatus
from complaint_engine.models.complaint.complaint import Complaint
from complaint_engine.repositories.complaint.complaint_repository import build_complaint_conditions
from complaint_engine.schemas.complaint.complaint_filters import ComplaintFilterParams


class ComplaintAnalyticsRepository:
    """Read-only aggregates honouring the same filters as listings."""

    def __init__(self, db: Session):
        self.db = db

    def get_status_breakdown(self, filters: Optional[ComplaintFilterParams]) -> Dict[ComplaintStatus, int]:
        conditions = build_complaint_conditions(filters)
        try:
            stmt = (
                select(Complaint.status, func.count(Complaint.id).label("count"))
                .group_by(Complaint.status)
            )
            if conditions:
                stmt = stmt.where(*conditions)
            return {ComplaintStatus(row.status): row.count for row in self.db.execute(stmt)}
        except SQLAlchemyError as e:
            raise RepositoryError(f"Status breakdown failed: {str(e)}") from e

    def get_average_rating(self, filters: Optional[ComplaintFilterParams]) -> Optional[float]:
        """Mean feedback rating over rated complaints, None when nothing is rated."""
        conditions = build_complaint_conditions(filters)
        try:
            stmt = select(func.avg(Complaint.feedback_rating)).where(
                Complaint.feedback_rating.isnot(None)
            )
            if conditions:
                stmt = stmt.where(*conditions)
            value = self.db.execute(stmt).scalar()
            return float(value) if value is not None else None
        except SQLAlchemyError as e:
            raise RepositoryError(f"Average rating failed: {str(e)}") from e

    def get_category_distribution(self, filters: Optional[ComplaintFilterParams]) -> List[Dict[str, Any]]:
        """Complaint counts per category, most frequent first."""
        conditions = build_complaint_conditions(filters)
        try:
            count_col = func.count(Complaint.id).label("count")
            stmt = (
                select(Complaint.category, count_col)
                .group_by(Complaint.category)
                .order_by(count_col.desc(), Complaint.category.asc())
            )
            if conditions:
                stmt = stmt.where(*conditions)
            return [
                {"category": ComplaintCategory(row.category), "count": row.count}
                for row in self.db.execute(stmt)
            ]
        except SQLAlchemyError as e:
            raise RepositoryError(f"Category distribution failed: {str(e)}") from e
