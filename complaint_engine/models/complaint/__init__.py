"""
Complaint models package.
"""

from complaint_engine.models.complaint.complaint import Complaint
from complaint_engine.models.complaint.complaint_history import ComplaintHistory
from complaint_engine.models.complaint.complaint_sequence import ComplaintSequence

__all__ = ["Complaint", "ComplaintHistory", "ComplaintSequence"]
