"""
Core building blocks shared across layers: exceptions and constants.
"""

from complaint_engine.core.exceptions import (
    AuthorizationError,
    BaseAppException,
    ConcurrencyConflictError,
    InvalidStateTransitionError,
    RepositoryError,
    ResourceNotFoundError,
    ValidationError,
)

__all__ = [
    "AuthorizationError",
    "BaseAppException",
    "ConcurrencyConflictError",
    "InvalidStateTransitionError",
    "RepositoryError",
    "ResourceNotFoundError",
    "ValidationError",
]
