"""
Post-commit notification delivery.

Transitions emit NotificationEffect values; the dispatcher hands them to a
NotificationGateway once the state change is durable. Delivery failures
are logged and dropped: no retries, and never a rollback of the
transition that produced them.
"""

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, Iterable, Optional

from complaint_engine.config.logging import get_logger
from complaint_engine.config.settings import get_settings
from complaint_engine.core.constants import NOTIFICATION_EVENT_TYPE

logger = get_logger(__name__)


@dataclass(frozen=True)
class NotificationEffect:
    """A message to deliver once the transition has committed."""

    recipient_id: Optional[str]
    title: str
    message: str
    event_type: str = NOTIFICATION_EVENT_TYPE
    payload: Dict[str, Any] = field(default_factory=dict)


class NotificationGateway(ABC):
    """External notifier boundary."""

    @abstractmethod
    def send(
        self,
        recipient_id: str,
        title: str,
        message: str,
        event_type: str,
        payload: Dict[str, Any],
    ) -> bool:
        """Deliver one notification; False or an exception means it was not delivered."""


class LoggingNotificationGateway(NotificationGateway):
    """Gateway that records notifications in the application log."""

    def send(self, recipient_id, title, message, event_type, payload) -> bool:
        logger.info(
            f"Notification to {recipient_id}: {title} - {message}",
            extra={
                "recipient_id": recipient_id,
                "complaint_id": payload.get("complaint_id"),
                "operation": event_type,
            },
        )
        return True


class NotificationDispatcher:
    """
    Delivers effects inline on the caller's thread or on a worker pool.

    Args:
        gateway: Delivery backend
        mode: "inline" or "background"
        max_workers: Pool size for background mode
    """

    def __init__(
        self,
        gateway: NotificationGateway,
        mode: str = "inline",
        max_workers: int = 4,
    ):
        self.gateway = gateway
        self.mode = mode
        self._executor: Optional[ThreadPoolExecutor] = None
        if mode == "background":
            self._executor = ThreadPoolExecutor(
                max_workers=max_workers,
                thread_name_prefix="complaint-notify",
            )

    def dispatch(self, effects: Iterable[NotificationEffect]) -> None:
        for effect in effects:
            if not effect.recipient_id:
                logger.debug(f"Skipping notification '{effect.title}' without recipient")
                continue
            if self._executor is not None:
                self._executor.submit(self.deliver, effect)
            else:
                self.deliver(effect)

    def deliver(self, effect: NotificationEffect) -> bool:
        """Send one effect, isolating any gateway failure."""
        context = {
            "recipient_id": effect.recipient_id,
            "complaint_id": effect.payload.get("complaint_id"),
            "complaint_number": effect.payload.get("complaint_number"),
        }
        try:
            delivered = self.gateway.send(
                effect.recipient_id,
                effect.title,
                effect.message,
                effect.event_type,
                dict(effect.payload),
            )
        except Exception as e:
            logger.error(
                f"Notification '{effect.title}' to {effect.recipient_id} failed: {e}",
                exc_info=True,
                extra=context,
            )
            return False

        if not delivered:
            logger.warning(
                f"Notification '{effect.title}' to {effect.recipient_id} was not delivered",
                extra=context,
            )
            return False
        return True

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)


@lru_cache()
def get_notification_dispatcher() -> NotificationDispatcher:
    """Process-wide dispatcher configured from settings."""
    settings = get_settings()
    return NotificationDispatcher(
        LoggingNotificationGateway(),
        mode=settings.NOTIFICATION_DISPATCH_MODE,
        max_workers=settings.NOTIFICATION_WORKERS,
    )
