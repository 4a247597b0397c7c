"""
API v1 router - aggregates all v1 endpoints.
"""

from fastapi import APIRouter

from complaint_engine.api.v1.complaints import router as complaints_router

router = APIRouter(
    responses={
        400: {"description": "Bad Request"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        500: {"description": "Internal Server Error"},
    }
)

router.include_router(complaints_router)
