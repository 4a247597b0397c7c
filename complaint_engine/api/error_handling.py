"""
Translation of service failures and request validation errors into HTTP responses.
"""

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from complaint_engine.config.logging import get_logger
from complaint_engine.services.base.service_result import ErrorCode, ServiceError, ServiceResult

logger = get_logger(__name__)

ERROR_STATUS_CODES: Dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.INSUFFICIENT_PERMISSIONS: status.HTTP_403_FORBIDDEN,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ServiceResultError(Exception):
    """Raised by endpoints when a service returns a failed result."""

    def __init__(self, error: ServiceError):
        self.error = error
        super().__init__(error.message)

    @property
    def status_code(self) -> int:
        return ERROR_STATUS_CODES.get(self.error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def envelope(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True, "data": jsonable_encoder(data)}
    if message:
        body["message"] = message
    return body


def unwrap(result: ServiceResult) -> Any:
    """Data of a successful result; otherwise raise for the exception handler."""
    if not result.is_success:
        raise ServiceResultError(result.error)
    return result.data


def _error_body(code: str, message: str, details: Any = None) -> Dict[str, Any]:
    return {
        "success": False,
        "message": message,
        "code": code,
        "details": jsonable_encoder(details),
    }


async def service_result_error_handler(request: Request, exc: ServiceResultError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.error.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.error.code.value, exc.error.message, exc.error.details),
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    field_errors: Dict[str, list] = {}
    for err in exc.errors():
        key = ".".join(str(part) for part in err["loc"] if part not in ("body", "query", "path"))
        field_errors.setdefault(key or "__root__", []).append(err["msg"])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(ErrorCode.VALIDATION_ERROR.value, "Validation failed", {"field_errors": field_errors}),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = ErrorCode.UNAUTHORIZED.value if exc.status_code == status.HTTP_401_UNAUTHORIZED else "HTTP_ERROR"
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceResultError, service_result_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
