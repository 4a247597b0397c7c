"""
Complaint repository for persistence, locking and filtered listing.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from complaint_engine.config.logging import get_logger
from complaint_engine.core.exceptions import RepositoryError, ResourceNotFoundError
from complaint_engine.models.base.enums import ComplaintSortField, ComplaintStatus, SortOrder
from complaint_engine.models.complaint.complaint import Complaint
from complaint_engine.models.complaint.complaint_history import ComplaintHistory
from complaint_engine.repositories.base.base_repository import BaseRepository
from complaint_engine.schemas.complaint.complaint_filters import ComplaintFilterParams

logger = get_logger(__name__)

SORT_COLUMNS = {
    ComplaintSortField.CREATED_AT: Complaint.created_at,
    ComplaintSortField.UPDATED_AT: Complaint.updated_at,
    ComplaintSortField.COMPLAINT_NUMBER: Complaint.complaint_number,
    ComplaintSortField.STATUS: Complaint.status,
    ComplaintSortField.CATEGORY: Complaint.category,
}


def build_complaint_conditions(filters: Optional[ComplaintFilterParams]) -> List[Any]:
    """
    Translate filter params into SQL conditions.

    The date range only applies when both bounds are present.
    """
    if filters is None:
        return []

    conditions = []
    if filters.reporter_id:
        conditions.append(Complaint.reporter_id == filters.reporter_id)
    if filters.resource_id:
        conditions.append(Complaint.resource_id == filters.resource_id)
    if filters.category:
        conditions.append(Complaint.category == filters.category)
    if filters.status:
        conditions.append(Complaint.status == filters.status)
    if filters.assigned_staff_id:
        conditions.append(Complaint.assigned_staff_id == filters.assigned_staff_id)
    if filters.has_date_range:
        conditions.append(
            and_(
                Complaint.created_at >= filters.date_from,
                Complaint.created_at <= filters.date_to,
            )
        )
    return conditions


class ComplaintRepository(BaseRepository[Complaint]):
    """
    Repository for complaint records and their history.

    Every write here flushes only; the calling service owns the commit.
    """

    def __init__(self, db: Session):
        super().__init__(Complaint, db)

    # ==================== Create ====================

    def create_complaint(
        self,
        complaint: Complaint,
        actor_id: str,
        note: str,
        timestamp: datetime,
    ) -> Complaint:
        """
        Insert a complaint together with its first history entry.

        Args:
            complaint: Unsaved complaint carrying its number and status
            actor_id: Submitting user
            note: History note for the submission
            timestamp: Creation time shared by complaint and history entry
        """
        complaint.created_at = timestamp
        complaint.updated_at = timestamp
        self.append_history(complaint, complaint.status, actor_id, note, timestamp)
        return self.create(complaint)

    # ==================== Read ====================

    def find_by_reference(self, reference: str) -> Optional[Complaint]:
        """Find a complaint by id or by complaint number."""
        try:
            stmt = select(Complaint).where(
                or_(Complaint.id == reference, Complaint.complaint_number == reference)
            )
            return self.db.execute(stmt).scalars().first()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Complaint lookup failed: {str(e)}") from e

    def get_by_reference(self, reference: str) -> Complaint:
        complaint = self.find_by_reference(reference)
        if complaint is None:
            raise ResourceNotFoundError("Complaint", reference)
        return complaint

    def lock_for_transition(self, reference: str) -> Complaint:
        """
        Load a complaint under a row lock, refreshing any cached state.

        Raises:
            ResourceNotFoundError: If no complaint matches the reference
        """
        stmt = (
            select(Complaint)
            .where(or_(Complaint.id == reference, Complaint.complaint_number == reference))
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        complaint = self.db.execute(stmt).scalars().first()
        if complaint is None:
            raise ResourceNotFoundError("Complaint", reference)
        return complaint

    def list_complaints(
        self,
        filters: Optional[ComplaintFilterParams],
        offset: int,
        limit: int,
        sort_field: ComplaintSortField = ComplaintSortField.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
    ) -> Tuple[List[Complaint], int]:
        """
        Page of complaints matching the filters plus the total match count.
        """
        conditions = build_complaint_conditions(filters)
        column = SORT_COLUMNS[ComplaintSortField(sort_field)]
        ordering = column.asc() if sort_order == SortOrder.ASC else column.desc()
        tiebreak = Complaint.id.asc() if sort_order == SortOrder.ASC else Complaint.id.desc()

        try:
            count_stmt = select(func.count(Complaint.id))
            stmt = select(Complaint)
            if conditions:
                count_stmt = count_stmt.where(*conditions)
                stmt = stmt.where(*conditions)

            total = self.db.execute(count_stmt).scalar_one()
            items = (
                self.db.execute(stmt.order_by(ordering, tiebreak).offset(offset).limit(limit))
                .scalars()
                .all()
            )
            return list(items), total

        except SQLAlchemyError as e:
            raise RepositoryError(f"Complaint listing failed: {str(e)}") from e

    def count_with_appellate_authority(self) -> int:
        """Number of complaints that have been handed to an appellate authority."""
        return self.count(Complaint.appellate_authority_id.isnot(None))

    # ==================== Transition writes ====================

    def apply_changes(self, complaint: Complaint, changes: Dict[str, Any]) -> Complaint:
        for field, value in changes.items():
            setattr(complaint, field, value)
        return complaint

    def append_history(
        self,
        complaint: Complaint,
        status: ComplaintStatus,
        actor_id: str,
        note: Optional[str],
        timestamp: datetime,
    ) -> ComplaintHistory:
        """Attach the next history entry; sequence continues from the last one."""
        sequence = max((entry.sequence for entry in complaint.history), default=0) + 1
        entry = ComplaintHistory(
            sequence=sequence,
            status=status,
            actor_id=actor_id,
            note=note,
            timestamp=timestamp,
        )
        complaint.history.append(entry)
        return entry
