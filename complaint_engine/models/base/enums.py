"""
Enum definitions shared by models and schemas.

Values match the identifiers used on the wire and in the database.
"""

from enum import Enum


class UserRole(str, Enum):
    """Roles a principal can hold"""
    RESIDENT = "resident"
    MAINTENANCE_STAFF = "maintenanceStaff"
    DEPARTMENT_ADMIN = "departmentAdmin"
    SUPER_ADMIN = "superAdmin"


class UserStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ComplaintCategory(str, Enum):
    """Complaint categories; doubles as the department name"""
    ELECTRICAL = "Electrical"
    CIVIL = "Civil"
    MISC = "Misc"


class ComplaintStatus(str, Enum):
    """Lifecycle states of a complaint"""
    PENDING = "pending"
    ASSIGNED = "assigned"
    RESOLVED = "resolved"
    CLOSED = "closed"
    ESCALATED = "escalated"
    FINAL_RESOLUTION = "finalResolution"

    @property
    def is_terminal(self) -> bool:
        return self in (ComplaintStatus.CLOSED, ComplaintStatus.FINAL_RESOLUTION)


class ResourceType(str, Enum):
    PERSONAL = "personal"
    FUNCTIONAL = "functional"
    GENERAL = "general"


class ResourceStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ComplaintSortField(str, Enum):
    """Columns a complaint listing may be ordered by"""
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    COMPLAINT_NUMBER = "complaint_number"
    STATUS = "status"
    CATEGORY = "category"
