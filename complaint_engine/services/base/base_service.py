"""
Base service class providing common functionality for all services.
"""

from abc import ABC
from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from complaint_engine.config.logging import get_logger
from complaint_engine.core.exceptions import (
    AuthorizationError,
    BaseAppException,
    ConcurrencyConflictError,
    InvalidStateTransitionError,
    ResourceNotFoundError,
    ValidationError,
)
from complaint_engine.services.base.service_result import (
    ErrorCode,
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)

TRepo = TypeVar("TRepo")

# Expected domain failures: logged as warnings, reported with their own message
EXCEPTION_ERROR_CODES = {
    ValidationError: ErrorCode.VALIDATION_ERROR,
    PydanticValidationError: ErrorCode.VALIDATION_ERROR,
    ResourceNotFoundError: ErrorCode.NOT_FOUND,
    InvalidStateTransitionError: ErrorCode.INVALID_STATE,
    AuthorizationError: ErrorCode.INSUFFICIENT_PERMISSIONS,
    ConcurrencyConflictError: ErrorCode.CONFLICT,
}


class BaseService(ABC, Generic[TRepo]):
    """
    Base service with common behaviors:
    - Shared logger and db session
    - Consistent error handling via ServiceResult
    - Transaction management utilities
    """

    def __init__(self, repository: TRepo, db_session: Session):
        """
        Initialize base service.

        Args:
            repository: Repository instance for data access
            db_session: SQLAlchemy database session
        """
        self.repository: TRepo = repository
        self.db: Session = db_session
        self._logger = get_logger(self.__class__.__name__)

    # -------------------------------------------------------------------------
    # Exception & Error Handling
    # -------------------------------------------------------------------------

    def _handle_exception(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        """
        Convert exception to a ServiceResult failure with logging.

        Args:
            exception: The caught exception
            operation: Description of the operation that failed
            entity_ref: Reference to the entity involved (ID, number, etc.)
            additional_context: Extra context for logging
        """
        context = {
            "operation": operation,
            "entity_ref": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
        }
        if additional_context:
            context.update(additional_context)

        error_code = self._map_exception_to_error_code(exception)

        if error_code is ErrorCode.INTERNAL_ERROR:
            self._logger.error(
                f"Error during {operation}: {exception}",
                exc_info=True,
                extra=context,
            )
            return ServiceResult.failure(
                ServiceError(
                    code=error_code,
                    message=f"Failed to {operation}",
                    severity=ErrorSeverity.CRITICAL,
                    details={
                        "error": str(exception),
                        "entity_ref": context["entity_ref"],
                    },
                )
            )

        self._logger.warning(f"{operation} rejected: {exception}", extra=context)
        message, details, field = self._describe_exception(exception)
        return ServiceResult.failure(
            ServiceError(
                code=error_code,
                message=message,
                severity=ErrorSeverity.WARNING,
                details=details,
                field=field,
            )
        )

    def _map_exception_to_error_code(self, exception: Exception) -> ErrorCode:
        """Map exception types to error codes."""
        for exc_type, error_code in EXCEPTION_ERROR_CODES.items():
            if isinstance(exception, exc_type):
                return error_code
        return ErrorCode.INTERNAL_ERROR

    @staticmethod
    def _describe_exception(exception: Exception):
        """Message, details and offending field for an expected failure."""
        if isinstance(exception, PydanticValidationError):
            field_errors: Dict[str, list] = {}
            for err in exception.errors():
                key = ".".join(str(part) for part in err["loc"]) or "__root__"
                field_errors.setdefault(key, []).append(err["msg"])
            first_field = next(iter(field_errors), None)
            return "Validation failed", {"field_errors": field_errors}, first_field

        if isinstance(exception, BaseAppException):
            field = None
            field_errors = exception.details.get("field_errors") if exception.details else None
            if field_errors:
                field = next(iter(field_errors))
            return exception.message, exception.details, field

        return str(exception), None, None

    # -------------------------------------------------------------------------
    # Transaction Management
    # -------------------------------------------------------------------------

    def _rollback(self) -> None:
        """Rollback the current transaction, suppressing rollback errors."""
        try:
            self.db.rollback()
            self._logger.debug("Transaction rolled back")
        except SQLAlchemyError as e:
            # Rollback errors must not mask the original error
            self._logger.warning(f"Rollback failed: {e}")
