"""
Principal directory entry.

Users are owned by the identity service; the engine reads them to
resolve principals, agencies, staff and appellate authorities.
"""

from typing import Optional

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from complaint_engine.models.base.base_model import BaseModel, enum_column
from complaint_engine.models.base.enums import ComplaintCategory, UserRole, UserStatus
from complaint_engine.models.base.mixins import TimestampMixin

__all__ = ["User"]


class User(BaseModel, TimestampMixin):
    """Registered user with a role and, for admins and staff, a department"""

    __tablename__ = "users"
    __table_args__ = (
        Index("ix_users_role_status", "role", "status"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    role: Mapped[UserRole] = mapped_column(
        enum_column(UserRole, "user_role"),
        nullable=False,
        default=UserRole.RESIDENT,
    )
    department: Mapped[Optional[ComplaintCategory]] = mapped_column(
        enum_column(ComplaintCategory, "user_department"),
        nullable=True,
        comment="Department for departmentAdmin and maintenanceStaff",
    )
    status: Mapped[UserStatus] = mapped_column(
        enum_column(UserStatus, "user_status"),
        nullable=False,
        default=UserStatus.PENDING,
    )

    @property
    def is_approved(self) -> bool:
        return self.status == UserStatus.APPROVED

    def __repr__(self) -> str:
        return f"<User(id={self.id}, role={self.role})>"
