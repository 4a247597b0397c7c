"""
SQLAlchemy models for the complaint lifecycle engine.

Importing this package registers every table on ``Base.metadata``.
"""

from complaint_engine.models.base import Base, BaseModel
from complaint_engine.models.complaint import Complaint, ComplaintHistory, ComplaintSequence
from complaint_engine.models.resource import Resource
from complaint_engine.models.user import User

__all__ = [
    "Base",
    "BaseModel",
    "Complaint",
    "ComplaintHistory",
    "ComplaintSequence",
    "Resource",
    "User",
]
