"""
Read-only view of the resource registry.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from complaint_engine.models.base.base_model import BaseModel, enum_column
from complaint_engine.models.base.enums import ResourceStatus, ResourceType
from complaint_engine.models.base.mixins import TimestampMixin

__all__ = ["Resource"]


class Resource(BaseModel, TimestampMixin):
    """Quarter, facility or common area a complaint can be raised against"""

    __tablename__ = "resources"

    resource_code: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    resource_type: Mapped[ResourceType] = mapped_column(
        enum_column(ResourceType, "resource_type"),
        nullable=False,
    )
    resource_name: Mapped[str] = mapped_column(String(255), nullable=False)
    resource_category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    status: Mapped[ResourceStatus] = mapped_column(
        enum_column(ResourceStatus, "resource_status"),
        nullable=False,
        default=ResourceStatus.ACTIVE,
    )

    @property
    def is_active(self) -> bool:
        return self.status == ResourceStatus.ACTIVE
