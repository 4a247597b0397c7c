from complaint_engine.models.base.base_model import Base, BaseModel, enum_column, utc_now
from complaint_engine.models.base.enums import (
    ComplaintCategory,
    ComplaintSortField,
    ComplaintStatus,
    ResourceStatus,
    ResourceType,
    SortOrder,
    UserRole,
    UserStatus,
)
from complaint_engine.models.base.mixins import TimestampMixin

__all__ = [
    "Base",
    "BaseModel",
    "TimestampMixin",
    "enum_column",
    "utc_now",
    "ComplaintCategory",
    "ComplaintSortField",
    "ComplaintStatus",
    "ResourceStatus",
    "ResourceType",
    "SortOrder",
    "UserRole",
    "UserStatus",
]
