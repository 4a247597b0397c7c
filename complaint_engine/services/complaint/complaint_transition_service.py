"""
Transactional runner for complaint lifecycle transitions.

Each transition loads the complaint under a row lock, checks access,
evaluates the pure workflow function, writes the field changes and one
history row in a single commit, and only then dispatches notifications.
"""

from typing import Callable, Optional, Type

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from complaint_engine.config.settings import Settings, get_settings
from complaint_engine.core.exceptions import ConcurrencyConflictError
from complaint_engine.models.base.base_model import utc_now
from complaint_engine.repositories.complaint.complaint_repository import ComplaintRepository
from complaint_engine.repositories.user.user_repository import UserRepository
from complaint_engine.schemas.complaint.complaint_response import ComplaintDetail
from complaint_engine.schemas.principal import Principal
from complaint_engine.services.base.authorization_service import (
    ComplaintAction,
    ensure_can_perform,
    ensure_role_allowed,
)
from complaint_engine.services.base.base_service import BaseService
from complaint_engine.services.base.notification_dispatcher import (
    NotificationDispatcher,
    get_notification_dispatcher,
)
from complaint_engine.services.base.service_result import ServiceResult
from complaint_engine.services.complaint.complaint_workflow import (
    ComplaintSnapshot,
    apply_event,
    ensure_can_apply,
)

EventBuilder = Callable[[ComplaintSnapshot], object]


class ComplaintTransitionService(BaseService[ComplaintRepository]):
    """
    Base for services that move a complaint through its lifecycle.

    Lost races are detected through the complaint's version column; the
    transition is retried from a fresh read so the loser sees the winner's
    state and fails its precondition instead of overwriting it.
    """

    def __init__(
        self,
        complaint_repo: ComplaintRepository,
        user_repo: UserRepository,
        db_session: Session,
        dispatcher: Optional[NotificationDispatcher] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(complaint_repo, db_session)
        self.complaint_repo = complaint_repo
        self.user_repo = user_repo
        self.dispatcher = dispatcher or get_notification_dispatcher()
        self.settings = settings or get_settings()

    def now(self):
        return utc_now()

    def run_transition(
        self,
        principal: Principal,
        reference: str,
        action: ComplaintAction,
        event_type: Type,
        build_event: EventBuilder,
        operation: str,
        success_message: Optional[str] = None,
    ) -> ServiceResult[ComplaintDetail]:
        """
        Apply one lifecycle event to a complaint.

        Args:
            principal: Acting user
            reference: Complaint id or complaint number
            action: Authorization action being performed
            event_type: Workflow event class, used for the early status check
            build_event: Builds the event from the locked snapshot; may look up
                collaborators and raise NotFound/Validation errors
            operation: Description used in logs and error messages
            success_message: Message attached to the successful result
        """
        log_context = {"complaint_id": reference, "actor_id": principal.user_id, "operation": operation}
        self._logger.info(f"Starting {operation} for complaint {reference}", extra=log_context)

        max_attempts = self.settings.TRANSITION_MAX_RETRIES
        attempt = 0

        try:
            ensure_role_allowed(principal, action)

            while True:
                attempt += 1
                try:
                    complaint = self.complaint_repo.lock_for_transition(reference)
                    ensure_can_perform(principal, action, complaint)

                    snapshot = ComplaintSnapshot.from_model(complaint)
                    ensure_can_apply(snapshot, event_type)

                    outcome = apply_event(snapshot, build_event(snapshot))

                    self.complaint_repo.apply_changes(complaint, outcome.changes)
                    entry = outcome.history_entry
                    self.complaint_repo.append_history(
                        complaint, entry.status, entry.actor_id, entry.note, entry.timestamp
                    )
                    self.db.flush()
                    self.db.commit()
                    break

                except (StaleDataError, IntegrityError) as e:
                    self._rollback()
                    if attempt >= max_attempts:
                        raise ConcurrencyConflictError("Complaint", reference, attempt) from e
                    self._logger.warning(
                        f"Concurrent update on complaint {reference} during {operation}, "
                        f"retrying ({attempt}/{max_attempts})",
                        extra=log_context,
                    )

            detail = ComplaintDetail.model_validate(complaint)

        except Exception as e:
            self._rollback()
            return self._handle_exception(e, operation, reference)

        self._logger.info(
            f"Complaint {detail.complaint_number} is now {detail.status.value}",
            extra={**log_context, "complaint_number": detail.complaint_number},
        )
        self.dispatcher.dispatch(outcome.effects)

        return ServiceResult.success(
            detail,
            message=success_message,
            metadata={"attempts": attempt},
        )
