"""
Core complaint model with lifecycle tracking.

Holds the reporter's submission, the current lifecycle status and the
fields populated by each transition (assignment, resolution, feedback,
escalation and final resolution).
"""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    JSON,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from complaint_engine.models.base.base_model import BaseModel, enum_column
from complaint_engine.models.base.enums import ComplaintCategory, ComplaintStatus
from complaint_engine.models.base.mixins import TimestampMixin

if TYPE_CHECKING:
    from complaint_engine.models.complaint.complaint_history import ComplaintHistory

__all__ = ["Complaint"]


class Complaint(BaseModel, TimestampMixin):
    """
    Complaint entity.

    Attributes:
        complaint_number: Unique human-readable reference (CMP-YY-MM-NNNN)
        reporter_id: Resident who submitted the complaint
        resource_id: Resource the complaint is about
        category / subcategory: Classification; category doubles as department
        images: Up to two image references
        status: Current lifecycle status
        assigned_agency_id / assigned_staff_id: Assignment targets
        feedback_rating / feedback_comment: Reporter feedback after resolution
        escalation_reason / appellate_authority_id: Set on escalation
        final_resolution: Appellate authority's decision
        version: Optimistic lock counter
    """

    __tablename__ = "complaints"
    __table_args__ = (
        Index("ix_complaints_complaint_number", "complaint_number", unique=True),
        Index("ix_complaints_reporter_status", "reporter_id", "status"),
        Index("ix_complaints_category_status", "category", "status"),
        Index("ix_complaints_staff_status", "assigned_staff_id", "status"),
        CheckConstraint(
            "feedback_rating IS NULL OR (feedback_rating >= 1 AND feedback_rating <= 5)",
            name="ck_complaints_rating_range",
        ),
        CheckConstraint(
            "assigned_staff_id IS NULL OR assigned_agency_id IS NOT NULL",
            name="ck_complaints_staff_requires_agency",
        ),
    )

    complaint_number: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="Human-readable complaint reference",
    )

    reporter_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        comment="User who submitted the complaint",
    )
    resource_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("resources.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        comment="Resource the complaint concerns",
    )

    category: Mapped[ComplaintCategory] = mapped_column(
        enum_column(ComplaintCategory, "complaint_category"),
        nullable=False,
    )
    subcategory: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    images: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Image references held by the external blob store",
    )

    status: Mapped[ComplaintStatus] = mapped_column(
        enum_column(ComplaintStatus, "complaint_status"),
        nullable=False,
        default=ComplaintStatus.PENDING,
    )

    # Assignment
    assigned_agency_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    assigned_staff_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    assigned_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Resolution
    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    resolution_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    closed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Feedback
    feedback_rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    feedback_comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    feedback_submitted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Escalation
    escalated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    escalation_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    appellate_authority_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    final_resolution: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    final_resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Optimistic lock counter",
    )

    __mapper_args__ = {"version_id_col": version}

    history: Mapped[List["ComplaintHistory"]] = relationship(
        "ComplaintHistory",
        back_populates="complaint",
        order_by="ComplaintHistory.sequence",
        lazy="selectin",
        cascade="save-update, merge",
        passive_deletes="all",
    )

    @property
    def is_terminal(self) -> bool:
        return ComplaintStatus(self.status).is_terminal

    def __repr__(self) -> str:
        return f"<Complaint(number={self.complaint_number}, status={self.status})>"
