"""
Custom Exceptions for the Complaint Lifecycle Engine

This module defines custom exception classes used throughout the application
for better error handling and debugging.
"""

from typing import Any, Dict, List, Optional


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', status_code={self.status_code})"


class ValidationError(BaseAppException):
    """Exception raised when data validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
        status_code: int = 400
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, details, status_code)


class ResourceNotFoundError(BaseAppException):
    """Exception raised when a requested resource is not found"""

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = f"{resource_type} not found"
            if resource_id:
                message += f" (ID: {resource_id})"

        details = {
            "resource_type": resource_type,
            "resource_id": resource_id
        }
        super().__init__(message, details, 404)


class AuthorizationError(BaseAppException):
    """Exception raised when the caller's role, department or ownership forbids an action"""

    def __init__(
        self,
        message: str = "Not authorized to access this complaint",
        action: Optional[str] = None,
        role: Optional[str] = None,
    ):
        details = {"action": action, "role": role}
        super().__init__(message, details, 403)


class InvalidStateTransitionError(BaseAppException):
    """Exception raised when a lifecycle transition is not permitted from the current status"""

    def __init__(
        self,
        current_status: str,
        target_status: Optional[str] = None,
        message: Optional[str] = None,
    ):
        if not message:
            if target_status:
                message = f"Cannot move complaint from '{current_status}' to '{target_status}'"
            else:
                message = f"Operation not permitted while complaint is '{current_status}'"

        details = {
            "current_status": current_status,
            "target_status": target_status,
        }
        super().__init__(message, details, 409)


class ConcurrencyConflictError(BaseAppException):
    """Exception raised when a record kept changing underneath a transition"""

    def __init__(
        self,
        resource_type: str = "Complaint",
        resource_id: Optional[str] = None,
        attempts: int = 0,
    ):
        message = f"{resource_type} was modified concurrently, please retry"
        details = {
            "resource_type": resource_type,
            "resource_id": resource_id,
            "attempts": attempts,
        }
        super().__init__(message, details, 409)


class RepositoryError(BaseAppException):
    """Exception raised for persistence failures"""

    def __init__(
        self,
        message: str = "Database operation failed",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details, 500)
