"""
Complaint endpoints.

Static paths are declared before ``/{complaint_id}`` so they are not
captured by the parameterised routes.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from complaint_engine.api.deps import get_current_principal, get_service_factory
from complaint_engine.api.error_handling import envelope, unwrap
from complaint_engine.models.base.enums import (
    ComplaintCategory,
    ComplaintSortField,
    ComplaintStatus,
    SortOrder,
)
from complaint_engine.schemas.complaint import (
    AssignAgencyRequest,
    AssignStaffRequest,
    ComplaintCreate,
    ComplaintFilterParams,
    FeedbackRequest,
    FinalResolutionRequest,
    ResolveRequest,
)
from complaint_engine.schemas.principal import Principal
from complaint_engine.services.base.service_factory import ServiceFactory

router = APIRouter(prefix="/complaints", tags=["Complaint Management"])


def complaint_filters(
    reporter_id: Optional[str] = Query(default=None),
    resource_id: Optional[str] = Query(default=None),
    category: Optional[ComplaintCategory] = Query(default=None),
    status: Optional[ComplaintStatus] = Query(default=None),
    assigned_staff_id: Optional[str] = Query(default=None),
    date_from: Optional[datetime] = Query(default=None),
    date_to: Optional[datetime] = Query(default=None),
) -> ComplaintFilterParams:
    return ComplaintFilterParams(
        reporter_id=reporter_id,
        resource_id=resource_id,
        category=category,
        status=status,
        assigned_staff_id=assigned_staff_id,
        date_from=date_from,
        date_to=date_to,
    )


# -------------------------------------------------------------------------
# Catalogue and reporting
# -------------------------------------------------------------------------

@router.get("/categories")
def get_categories(
    principal: Principal = Depends(get_current_principal),
    services: ServiceFactory = Depends(get_service_factory),
):
    return envelope(unwrap(services.complaints().list_categories()))


@router.get("/subcategories/{category}")
def get_subcategories(
    category: str,
    principal: Principal = Depends(get_current_principal),
    services: ServiceFactory = Depends(get_service_factory),
):
    return envelope(unwrap(services.complaints().list_subcategories(category)))


@router.get("/stats")
def get_complaint_stats(
    filters: ComplaintFilterParams = Depends(complaint_filters),
    principal: Principal = Depends(get_current_principal),
    services: ServiceFactory = Depends(get_service_factory),
):
    return envelope(unwrap(services.analytics().stats(principal, filters)))


@router.get("/category-distribution")
def get_category_distribution(
    filters: ComplaintFilterParams = Depends(complaint_filters),
    principal: Principal = Depends(get_current_principal),
    services: ServiceFactory = Depends(get_service_factory),
):
    return envelope(unwrap(services.analytics().category_distribution(principal, filters)))


# -------------------------------------------------------------------------
# Intake and listing
# -------------------------------------------------------------------------

@router.post("", status_code=status.HTTP_201_CREATED)
def create_complaint(
    payload: ComplaintCreate,
    principal: Principal = Depends(get_current_principal),
    services: ServiceFactory = Depends(get_service_factory),
):
    result = services.complaints().submit_complaint(principal, payload)
    return envelope(unwrap(result), result.message)


@router.get("")
def list_complaints(
    filters: ComplaintFilterParams = Depends(complaint_filters),
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
    sort_field: ComplaintSortField = Query(default=ComplaintSortField.CREATED_AT),
    sort_order: SortOrder = Query(default=SortOrder.DESC),
    principal: Principal = Depends(get_current_principal),
    services: ServiceFactory = Depends(get_service_factory),
):
    result = services.complaints().list_complaints(
        principal,
        filters,
        page=page,
        limit=limit,
        sort_field=sort_field,
        sort_order=sort_order,
    )
    return envelope(unwrap(result))


# -------------------------------------------------------------------------
# Single complaint
# -------------------------------------------------------------------------

@router.get("/{complaint_id}")
def get_complaint(
    complaint_id: str,
    principal: Principal = Depends(get_current_principal),
    services: ServiceFactory = Depends(get_service_factory),
):
    return envelope(unwrap(services.complaints().get_complaint(principal, complaint_id)))


@router.get("/{complaint_id}/history")
def get_complaint_history(
    complaint_id: str,
    principal: Principal = Depends(get_current_principal),
    services: ServiceFactory = Depends(get_service_factory),
):
    return envelope(unwrap(services.complaints().get_history(principal, complaint_id)))


@router.put("/{complaint_id}/assign")
def assign_complaint(
    complaint_id: str,
    body: AssignAgencyRequest,
    principal: Principal = Depends(get_current_principal),
    services: ServiceFactory = Depends(get_service_factory),
):
    result = services.assignment().assign_to_agency(principal, complaint_id, body.agency_id)
    return envelope(unwrap(result), result.message)


@router.put("/{complaint_id}/assign-staff")
def assign_complaint_to_staff(
    complaint_id: str,
    body: AssignStaffRequest,
    principal: Principal = Depends(get_current_principal),
    services: ServiceFactory = Depends(get_service_factory),
):
    result = services.assignment().assign_to_staff(principal, complaint_id, body.staff_id)
    return envelope(unwrap(result), result.message)


@router.put("/{complaint_id}/resolve")
def resolve_complaint(
    complaint_id: str,
    body: ResolveRequest,
    principal: Principal = Depends(get_current_principal),
    services: ServiceFactory = Depends(get_service_factory),
):
    result = services.resolution().resolve(principal, complaint_id, body.resolution_notes)
    return envelope(unwrap(result), result.message)


@router.put("/{complaint_id}/feedback")
def submit_feedback(
    complaint_id: str,
    body: FeedbackRequest,
    principal: Principal = Depends(get_current_principal),
    services: ServiceFactory = Depends(get_service_factory),
):
    result = services.feedback().submit_feedback(principal, complaint_id, body.rating, body.comment)
    return envelope(unwrap(result), result.message)


@router.put("/{complaint_id}/final-resolution")
def finalize_complaint(
    complaint_id: str,
    body: FinalResolutionRequest,
    principal: Principal = Depends(get_current_principal),
    services: ServiceFactory = Depends(get_service_factory),
):
    result = services.escalation().finalize(principal, complaint_id, body.final_resolution)
    return envelope(unwrap(result), result.message)
