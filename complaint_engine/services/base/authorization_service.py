"""
Role-based authorization and query scoping for complaints.

Every role maps to exactly one scoper and one ownership check; adding a
role without extending both tables fails at import time.
"""

from enum import Enum
from typing import Callable, Dict, FrozenSet, Optional

from complaint_engine.core.exceptions import AuthorizationError
from complaint_engine.models.base.enums import UserRole
from complaint_engine.models.complaint.complaint import Complaint
from complaint_engine.schemas.complaint.complaint_filters import ComplaintFilterParams
from complaint_engine.schemas.principal import Principal


class ComplaintAction(str, Enum):
    """Operations a principal can attempt on a complaint."""

    SUBMIT = "submit"
    VIEW = "view"
    ASSIGN_AGENCY = "assign_agency"
    ASSIGN_STAFF = "assign_staff"
    RESOLVE = "resolve"
    SUBMIT_FEEDBACK = "submit_feedback"
    FINALIZE = "finalize"


# -------------------------------------------------------------------------
# Query scoping
# -------------------------------------------------------------------------

def _scope_resident(principal: Principal, requested: ComplaintFilterParams) -> ComplaintFilterParams:
    return requested.model_copy(
        update={
            "reporter_id": principal.user_id,
            "category": None,
            "assigned_staff_id": None,
        }
    )


def _scope_maintenance_staff(principal: Principal, requested: ComplaintFilterParams) -> ComplaintFilterParams:
    """
    Listings and stats only cover complaints where the user is the assigned
    staff member, even when they also act as the assigned agency.
    """
    return requested.model_copy(update={"assigned_staff_id": principal.user_id})


def _scope_department_admin(principal: Principal, requested: ComplaintFilterParams) -> ComplaintFilterParams:
    return requested.model_copy(update={"category": principal.department})


def _scope_super_admin(principal: Principal, requested: ComplaintFilterParams) -> ComplaintFilterParams:
    return requested.model_copy()


ROLE_SCOPERS: Dict[UserRole, Callable[[Principal, ComplaintFilterParams], ComplaintFilterParams]] = {
    UserRole.RESIDENT: _scope_resident,
    UserRole.MAINTENANCE_STAFF: _scope_maintenance_staff,
    UserRole.DEPARTMENT_ADMIN: _scope_department_admin,
    UserRole.SUPER_ADMIN: _scope_super_admin,
}


def scope_filters(
    principal: Principal,
    requested: Optional[ComplaintFilterParams] = None,
) -> ComplaintFilterParams:
    """
    Narrow requested filters to what the principal may see.

    Role-forced fields always win over requested values; any other
    requested filter is kept as a further narrowing.
    """
    requested = requested or ComplaintFilterParams()
    return ROLE_SCOPERS[principal.role](principal, requested)


# -------------------------------------------------------------------------
# Single-record checks
# -------------------------------------------------------------------------

def _is_assigned_handler(principal: Principal, complaint: Complaint) -> bool:
    """
    Staff may open and resolve a complaint by id when assigned either as the
    staff member or as the agency. Listings are narrower, see
    _scope_maintenance_staff.
    """
    return principal.user_id in (complaint.assigned_staff_id, complaint.assigned_agency_id)


def _in_department(principal: Principal, complaint: Complaint) -> bool:
    return principal.department is not None and complaint.category == principal.department


ROLE_VIEW_CHECKS: Dict[UserRole, Callable[[Principal, Complaint], bool]] = {
    UserRole.RESIDENT: lambda principal, complaint: complaint.reporter_id == principal.user_id,
    UserRole.MAINTENANCE_STAFF: _is_assigned_handler,
    UserRole.DEPARTMENT_ADMIN: _in_department,
    UserRole.SUPER_ADMIN: lambda principal, complaint: True,
}

ALL_ROLES: FrozenSet[UserRole] = frozenset(UserRole)

ACTION_ROLES: Dict[ComplaintAction, FrozenSet[UserRole]] = {
    ComplaintAction.SUBMIT: ALL_ROLES,
    ComplaintAction.VIEW: ALL_ROLES,
    ComplaintAction.ASSIGN_AGENCY: frozenset({UserRole.SUPER_ADMIN, UserRole.DEPARTMENT_ADMIN}),
    ComplaintAction.ASSIGN_STAFF: frozenset({UserRole.SUPER_ADMIN, UserRole.DEPARTMENT_ADMIN}),
    ComplaintAction.RESOLVE: frozenset(
        {UserRole.SUPER_ADMIN, UserRole.DEPARTMENT_ADMIN, UserRole.MAINTENANCE_STAFF}
    ),
    ComplaintAction.SUBMIT_FEEDBACK: ALL_ROLES,
    ComplaintAction.FINALIZE: frozenset({UserRole.SUPER_ADMIN}),
}


def _reporter_only(principal: Principal, complaint: Complaint) -> bool:
    return complaint.reporter_id == principal.user_id


# Object-level checks that replace the role view check for an action
ACTION_OBJECT_CHECKS: Dict[ComplaintAction, Callable[[Principal, Complaint], bool]] = {
    ComplaintAction.SUBMIT_FEEDBACK: _reporter_only,
}

_missing = (set(UserRole) - set(ROLE_SCOPERS)) | (set(UserRole) - set(ROLE_VIEW_CHECKS))
if _missing:
    raise RuntimeError(f"Roles without authorization rules: {sorted(r.value for r in _missing)}")
_missing_actions = set(ComplaintAction) - set(ACTION_ROLES)
if _missing_actions:
    raise RuntimeError(f"Actions without role rules: {sorted(a.value for a in _missing_actions)}")


def ensure_role_allowed(principal: Principal, action: ComplaintAction) -> None:
    """Reject the action outright when the principal's role can never perform it."""
    if principal.role not in ACTION_ROLES[action]:
        raise AuthorizationError(
            f"Role '{principal.role.value}' is not allowed to {action.value.replace('_', ' ')}",
            action=action.value,
            role=principal.role.value,
        )


def ensure_can_view(principal: Principal, complaint: Complaint) -> None:
    if not ROLE_VIEW_CHECKS[principal.role](principal, complaint):
        raise AuthorizationError(
            "Not authorized to access this complaint",
            action=ComplaintAction.VIEW.value,
            role=principal.role.value,
        )


def ensure_can_perform(principal: Principal, action: ComplaintAction, complaint: Complaint) -> None:
    """
    Role and ownership check for an action on a specific complaint.

    Raises:
        AuthorizationError: When the role, department or ownership forbids it
    """
    ensure_role_allowed(principal, action)

    check = ACTION_OBJECT_CHECKS.get(action, ROLE_VIEW_CHECKS[principal.role])
    if not check(principal, complaint):
        raise AuthorizationError(
            f"Not authorized to {action.value.replace('_', ' ')} this complaint",
            action=action.value,
            role=principal.role.value,
        )
