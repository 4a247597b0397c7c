"""
Authenticated caller identity as seen by the lifecycle engine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from pydantic import ConfigDict, Field, model_validator

from complaint_engine.models.base.enums import ComplaintCategory, UserRole
from complaint_engine.schemas.common.base import BaseSchema

if TYPE_CHECKING:
    from complaint_engine.models.user.user import User

__all__ = ["Principal", "Role"]

Role = UserRole


class Principal(BaseSchema):
    """Immutable caller context: who is acting, in which role and department."""

    model_config = ConfigDict(frozen=True, from_attributes=True, populate_by_name=True)

    user_id: str = Field(..., description="Caller's user id")
    role: UserRole
    department: Optional[ComplaintCategory] = Field(
        default=None,
        description="Department for departmentAdmin and maintenanceStaff",
    )
    name: Optional[str] = None

    @model_validator(mode="after")
    def department_admin_has_department(self) -> "Principal":
        if self.role == UserRole.DEPARTMENT_ADMIN and self.department is None:
            raise ValueError("departmentAdmin principals must belong to a department")
        return self

    @classmethod
    def from_user(cls, user: "User") -> "Principal":
        return cls(
            user_id=user.id,
            role=user.role,
            department=user.department,
            name=user.name,
        )
