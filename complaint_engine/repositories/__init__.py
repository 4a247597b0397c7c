"""
Data access layer.
"""

from complaint_engine.repositories.base import BaseRepository
from complaint_engine.repositories.complaint import (
    ComplaintAnalyticsRepository,
    ComplaintRepository,
    ComplaintSequenceRepository,
)
from complaint_engine.repositories.resource import ResourceRepository
from complaint_engine.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "ComplaintAnalyticsRepository",
    "ComplaintRepository",
    "ComplaintSequenceRepository",
    "ResourceRepository",
    "UserRepository",
]
