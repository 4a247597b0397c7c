"""
Complaint lifecycle engine.

Status state machine for maintenance complaints (submission, assignment,
resolution, feedback and two-tier escalation) with audit history and
post-commit notifications.
"""

__version__ = "1.0.0"
