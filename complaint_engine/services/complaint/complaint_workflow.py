"""
Complaint lifecycle state machine.

Pure functions only: given a snapshot of a complaint and an event, compute
the new status, the field changes, the history entry to append and the
notifications to send after commit. Nothing here touches the database.

    pending -> assigned -> resolved -> closed
                                    -> escalated -> finalResolution
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, FrozenSet, Iterable, Optional, Tuple, Type

from complaint_engine.core.exceptions import InvalidStateTransitionError, ValidationError
from complaint_engine.models.base.enums import ComplaintCategory, ComplaintStatus
from complaint_engine.services.base.notification_dispatcher import NotificationEffect

ALLOWED_TRANSITIONS: Dict[ComplaintStatus, FrozenSet[ComplaintStatus]] = {
    ComplaintStatus.PENDING: frozenset({ComplaintStatus.ASSIGNED}),
    ComplaintStatus.ASSIGNED: frozenset({ComplaintStatus.RESOLVED}),
    ComplaintStatus.RESOLVED: frozenset({ComplaintStatus.CLOSED, ComplaintStatus.ESCALATED}),
    ComplaintStatus.ESCALATED: frozenset({ComplaintStatus.FINAL_RESOLUTION}),
    ComplaintStatus.CLOSED: frozenset(),
    ComplaintStatus.FINAL_RESOLUTION: frozenset(),
}


def can_transition(current: ComplaintStatus, target: ComplaintStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[ComplaintStatus(current)]


@dataclass(frozen=True)
class ComplaintSnapshot:
    """The fields of a complaint that transitions read."""

    id: str
    complaint_number: str
    status: ComplaintStatus
    reporter_id: str
    category: ComplaintCategory
    assigned_agency_id: Optional[str] = None
    assigned_staff_id: Optional[str] = None

    @classmethod
    def from_model(cls, complaint) -> "ComplaintSnapshot":
        return cls(
            id=complaint.id,
            complaint_number=complaint.complaint_number,
            status=ComplaintStatus(complaint.status),
            reporter_id=complaint.reporter_id,
            category=ComplaintCategory(complaint.category),
            assigned_agency_id=complaint.assigned_agency_id,
            assigned_staff_id=complaint.assigned_staff_id,
        )

    @property
    def payload(self) -> Dict[str, Any]:
        return {
            "complaint_id": self.id,
            "complaint_number": self.complaint_number,
        }


# -------------------------------------------------------------------------
# Events
# -------------------------------------------------------------------------

@dataclass(frozen=True)
class AssignAgency:
    actor_id: str
    agency_id: str
    agency_name: str
    at: datetime


@dataclass(frozen=True)
class AssignStaff:
    actor_id: str
    staff_id: str
    staff_name: str
    at: datetime


@dataclass(frozen=True)
class Resolve:
    actor_id: str
    notes: str
    at: datetime


@dataclass(frozen=True)
class SubmitFeedback:
    """
    Reporter feedback. ``appellate_authority_id`` is only consulted when the
    rating falls below ``close_threshold``.
    """

    actor_id: str
    rating: int
    comment: Optional[str]
    at: datetime
    close_threshold: int = 3
    default_escalation_reason: str = "User not satisfied with resolution"
    appellate_authority_id: Optional[str] = None


@dataclass(frozen=True)
class Finalize:
    actor_id: str
    resolution: str
    at: datetime


# Status a complaint must be in for each event
PRECONDITIONS: Dict[Type, FrozenSet[ComplaintStatus]] = {
    AssignAgency: frozenset({ComplaintStatus.PENDING}),
    AssignStaff: frozenset({ComplaintStatus.ASSIGNED}),
    Resolve: frozenset({ComplaintStatus.ASSIGNED}),
    SubmitFeedback: frozenset({ComplaintStatus.RESOLVED}),
    Finalize: frozenset({ComplaintStatus.ESCALATED}),
}

_PRECONDITION_MESSAGES: Dict[Type, str] = {
    AssignAgency: "Only pending complaints can be assigned to an agency",
    AssignStaff: "Staff can only be assigned to complaints already assigned to an agency",
    Resolve: "Only assigned complaints can be resolved",
    SubmitFeedback: "Feedback can only be provided for resolved complaints",
    Finalize: "Only escalated complaints can receive final resolution",
}


@dataclass(frozen=True)
class HistoryEntryDraft:
    status: ComplaintStatus
    actor_id: str
    note: Optional[str]
    timestamp: datetime


@dataclass(frozen=True)
class TransitionOutcome:
    """Everything the orchestrator applies for one successful transition."""

    status: ComplaintStatus
    changes: Dict[str, Any]
    history_entry: HistoryEntryDraft
    effects: Tuple[NotificationEffect, ...] = field(default_factory=tuple)


def ensure_can_apply(snapshot: ComplaintSnapshot, event_type: Type) -> None:
    """
    Raises:
        InvalidStateTransitionError: When the complaint's status does not admit the event
    """
    if snapshot.status not in PRECONDITIONS[event_type]:
        raise InvalidStateTransitionError(
            snapshot.status.value,
            message=_PRECONDITION_MESSAGES[event_type],
        )
    if event_type is AssignStaff and not snapshot.assigned_agency_id:
        raise InvalidStateTransitionError(
            snapshot.status.value,
            message=_PRECONDITION_MESSAGES[AssignStaff],
        )


# -------------------------------------------------------------------------
# Transition handlers
# -------------------------------------------------------------------------

def _assign_agency(snapshot: ComplaintSnapshot, event: AssignAgency) -> TransitionOutcome:
    status = ComplaintStatus.ASSIGNED
    return TransitionOutcome(
        status=status,
        changes={
            "status": status,
            "assigned_agency_id": event.agency_id,
            "assigned_at": event.at,
        },
        history_entry=HistoryEntryDraft(status, event.actor_id, f"Assigned to {event.agency_name}", event.at),
        effects=(
            NotificationEffect(
                event.agency_id,
                "Complaint Assigned",
                f"A complaint {snapshot.complaint_number} has been assigned to you",
                payload=snapshot.payload,
            ),
            NotificationEffect(
                snapshot.reporter_id,
                "Complaint Update",
                f"Your complaint {snapshot.complaint_number} has been assigned to maintenance staff",
                payload=snapshot.payload,
            ),
        ),
    )


def _assign_staff(snapshot: ComplaintSnapshot, event: AssignStaff) -> TransitionOutcome:
    status = snapshot.status
    return TransitionOutcome(
        status=status,
        changes={"assigned_staff_id": event.staff_id},
        history_entry=HistoryEntryDraft(status, event.actor_id, f"Assigned to staff: {event.staff_name}", event.at),
        effects=(
            NotificationEffect(
                event.staff_id,
                "Complaint Assigned",
                f"A complaint {snapshot.complaint_number} has been assigned to you",
                payload=snapshot.payload,
            ),
        ),
    )


def _resolve(snapshot: ComplaintSnapshot, event: Resolve) -> TransitionOutcome:
    status = ComplaintStatus.RESOLVED
    return TransitionOutcome(
        status=status,
        changes={
            "status": status,
            "resolved_at": event.at,
            "resolution_notes": event.notes,
        },
        history_entry=HistoryEntryDraft(status, event.actor_id, event.notes, event.at),
        effects=(
            NotificationEffect(
                snapshot.reporter_id,
                "Complaint Resolved",
                f"Your complaint {snapshot.complaint_number} has been resolved. Please provide feedback.",
                payload=snapshot.payload,
            ),
        ),
    )


def _submit_feedback(snapshot: ComplaintSnapshot, event: SubmitFeedback) -> TransitionOutcome:
    if not 1 <= event.rating <= 5:
        raise ValidationError(
            "Rating must be between 1 and 5",
            field_errors={"rating": ["Rating must be between 1 and 5"]},
        )

    comment_text = event.comment or "None"
    changes: Dict[str, Any] = {
        "feedback_rating": event.rating,
        "feedback_comment": event.comment,
        "feedback_submitted_at": event.at,
    }

    if event.rating >= event.close_threshold:
        status = ComplaintStatus.CLOSED
        changes.update(status=status, closed_at=event.at)
        note = f"User satisfied with resolution. Rating: {event.rating}/5, Comment: {comment_text}"
        effects = (
            NotificationEffect(
                snapshot.assigned_agency_id,
                "Complaint Closed",
                f"Complaint {snapshot.complaint_number} has been closed with rating: {event.rating}/5",
                payload=snapshot.payload,
            ),
        )
    else:
        status = ComplaintStatus.ESCALATED
        changes.update(
            status=status,
            escalated_at=event.at,
            escalation_reason=event.comment or event.default_escalation_reason,
            appellate_authority_id=event.appellate_authority_id,
        )
        note = f"User not satisfied with resolution. Rating: {event.rating}/5, Comment: {comment_text}"
        effects = (
            NotificationEffect(
                event.appellate_authority_id,
                "Complaint Escalated",
                f"Complaint {snapshot.complaint_number} has been escalated due to unsatisfactory resolution",
                payload=snapshot.payload,
            ),
            NotificationEffect(
                snapshot.assigned_agency_id,
                "Complaint Escalated",
                f"Complaint {snapshot.complaint_number} has been escalated. Rating: {event.rating}/5",
                payload=snapshot.payload,
            ),
        )

    return TransitionOutcome(
        status=status,
        changes=changes,
        history_entry=HistoryEntryDraft(status, event.actor_id, note, event.at),
        effects=effects,
    )


def _finalize(snapshot: ComplaintSnapshot, event: Finalize) -> TransitionOutcome:
    status = ComplaintStatus.FINAL_RESOLUTION
    return TransitionOutcome(
        status=status,
        changes={
            "status": status,
            "final_resolution": event.resolution,
            "final_resolved_at": event.at,
            "closed_at": event.at,
        },
        history_entry=HistoryEntryDraft(status, event.actor_id, f"Final resolution: {event.resolution}", event.at),
        effects=(
            NotificationEffect(
                snapshot.reporter_id,
                "Final Resolution",
                f"Your escalated complaint {snapshot.complaint_number} has received final resolution "
                f"from the appellate authority",
                payload=snapshot.payload,
            ),
            NotificationEffect(
                snapshot.assigned_agency_id,
                "Final Resolution",
                f"Escalated complaint {snapshot.complaint_number} has received final resolution "
                f"from the appellate authority",
                payload=snapshot.payload,
            ),
        ),
    )


TRANSITIONS: Dict[Type, Callable[[ComplaintSnapshot, Any], TransitionOutcome]] = {
    AssignAgency: _assign_agency,
    AssignStaff: _assign_staff,
    Resolve: _resolve,
    SubmitFeedback: _submit_feedback,
    Finalize: _finalize,
}


def apply_event(snapshot: ComplaintSnapshot, event) -> TransitionOutcome:
    """
    Compute the outcome of applying an event to a complaint.

    Raises:
        InvalidStateTransitionError: If the event is not allowed from the current status
        ValidationError: If the event carries invalid data
    """
    event_type = type(event)
    ensure_can_apply(snapshot, event_type)

    outcome = TRANSITIONS[event_type](snapshot, event)

    if outcome.status != snapshot.status and not can_transition(snapshot.status, outcome.status):
        raise InvalidStateTransitionError(snapshot.status.value, outcome.status.value)
    return outcome


def submission_effects(
    complaint_id: str,
    complaint_number: str,
    category: ComplaintCategory,
    recipient_ids: Iterable[str],
) -> Tuple[NotificationEffect, ...]:
    """One "New Complaint Received" notification per audience member."""
    payload = {"complaint_id": complaint_id, "complaint_number": complaint_number}
    return tuple(
        NotificationEffect(
            recipient_id,
            "New Complaint Received",
            f"A new {ComplaintCategory(category).value} complaint has been submitted: {complaint_number}",
            payload=payload,
        )
        for recipient_id in recipient_ids
    )
