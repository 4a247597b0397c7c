"""
Shared service infrastructure: results, base class, authorization and notifications.

ServiceFactory is imported from its module directly to keep this package
free of the complaint services it builds.
"""

from complaint_engine.services.base.base_service import BaseService
from complaint_engine.services.base.notification_dispatcher import (
    LoggingNotificationGateway,
    NotificationDispatcher,
    NotificationEffect,
    NotificationGateway,
)
from complaint_engine.services.base.service_result import (
    ErrorCode,
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)

__all__ = [
    "BaseService",
    "ErrorCode",
    "ErrorSeverity",
    "LoggingNotificationGateway",
    "NotificationDispatcher",
    "NotificationEffect",
    "NotificationGateway",
    "ServiceError",
    "ServiceResult",
]
