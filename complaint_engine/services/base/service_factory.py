"""
Service factory for dependency injection and service instantiation.
"""

from typing import Dict, Optional

from sqlalchemy.orm import Session

from complaint_engine.config.logging import get_logger
from complaint_engine.config.settings import Settings, get_settings
from complaint_engine.repositories.complaint import (
    ComplaintAnalyticsRepository,
    ComplaintRepository,
    ComplaintSequenceRepository,
)
from complaint_engine.repositories.resource import ResourceRepository
from complaint_engine.repositories.user import UserRepository
from complaint_engine.services.base.base_service import BaseService
from complaint_engine.services.base.notification_dispatcher import (
    NotificationDispatcher,
    get_notification_dispatcher,
)
from complaint_engine.services.complaint import (
    ComplaintAnalyticsService,
    ComplaintAssignmentService,
    ComplaintEscalationService,
    ComplaintFeedbackService,
    ComplaintResolutionService,
    ComplaintService,
)


class ServiceFactory:
    """
    Builds complaint services sharing one session, dispatcher and settings.

    Instances are cached per factory, so one factory per request/session.
    """

    def __init__(
        self,
        db_session: Session,
        dispatcher: Optional[NotificationDispatcher] = None,
        settings: Optional[Settings] = None,
    ):
        self.db = db_session
        self.dispatcher = dispatcher or get_notification_dispatcher()
        self.settings = settings or get_settings()
        self._logger = get_logger(self.__class__.__name__)
        self._service_cache: Dict[str, BaseService] = {}

        self.complaint_repo = ComplaintRepository(db_session)
        self.user_repo = UserRepository(db_session)

    def _cached(self, key: str, build) -> BaseService:
        if key not in self._service_cache:
            self._service_cache[key] = build()
            self._logger.debug(f"Created {type(self._service_cache[key]).__name__}")
        return self._service_cache[key]

    def _transition_service(self, cls):
        return cls(self.complaint_repo, self.user_repo, self.db, self.dispatcher, self.settings)

    def complaints(self) -> ComplaintService:
        return self._cached(
            "complaint",
            lambda: ComplaintService(
                self.complaint_repo,
                ComplaintSequenceRepository(self.db),
                self.user_repo,
                ResourceRepository(self.db),
                self.db,
                self.dispatcher,
                self.settings,
            ),
        )

    def assignment(self) -> ComplaintAssignmentService:
        return self._cached("assignment", lambda: self._transition_service(ComplaintAssignmentService))

    def resolution(self) -> ComplaintResolutionService:
        return self._cached("resolution", lambda: self._transition_service(ComplaintResolutionService))

    def feedback(self) -> ComplaintFeedbackService:
        return self._cached("feedback", lambda: self._transition_service(ComplaintFeedbackService))

    def escalation(self) -> ComplaintEscalationService:
        return self._cached("escalation", lambda: self._transition_service(ComplaintEscalationService))

    def analytics(self) -> ComplaintAnalyticsService:
        return self._cached(
            "analytics",
            lambda: ComplaintAnalyticsService(ComplaintAnalyticsRepository(self.db), self.db),
        )
