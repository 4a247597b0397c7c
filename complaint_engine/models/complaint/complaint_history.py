"""
Append-only audit trail of complaint transitions.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, event, inspect
from sqlalchemy.orm import Mapped, mapped_column, relationship

from complaint_engine.core.exceptions import RepositoryError
from complaint_engine.models.base.base_model import BaseModel, enum_column, utc_now
from complaint_engine.models.base.enums import ComplaintStatus

if TYPE_CHECKING:
    from complaint_engine.models.complaint.complaint import Complaint

__all__ = ["ComplaintHistory"]


class ComplaintHistory(BaseModel):
    """One entry per successful transition, ordered by sequence"""

    __tablename__ = "complaint_history"
    __table_args__ = (
        UniqueConstraint("complaint_id", "sequence", name="uq_complaint_history_sequence"),
    )

    complaint_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("complaints.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    sequence: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="1-based position in the complaint's timeline",
    )
    status: Mapped[ComplaintStatus] = mapped_column(
        enum_column(ComplaintStatus, "complaint_history_status"),
        nullable=False,
        comment="Status after the transition",
    )
    actor_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    complaint: Mapped["Complaint"] = relationship("Complaint", back_populates="history")

    def __repr__(self) -> str:
        return f"<ComplaintHistory(complaint_id={self.complaint_id}, sequence={self.sequence}, status={self.status})>"


@event.listens_for(ComplaintHistory, "before_update")
def _reject_history_update(mapper, connection, target):
    state = inspect(target)
    changed = [
        attr.key
        for attr in mapper.column_attrs
        if state.attrs[attr.key].history.has_changes()
    ]
    if changed:
        raise RepositoryError(
            "Complaint history entries are immutable",
            details={"history_id": target.id, "fields": changed},
        )


@event.listens_for(ComplaintHistory, "before_delete")
def _reject_history_delete(mapper, connection, target):
    raise RepositoryError(
        "Complaint history entries cannot be deleted",
        details={"history_id": target.id},
    )
