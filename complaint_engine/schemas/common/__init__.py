from complaint_engine.schemas.common.base import BaseFilterSchema, BaseResponseSchema, BaseSchema
from complaint_engine.schemas.common.pagination import PaginatedResponse, PaginationParams

__all__ = [
    "BaseFilterSchema",
    "BaseResponseSchema",
    "BaseSchema",
    "PaginatedResponse",
    "PaginationParams",
]
