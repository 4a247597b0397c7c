"""
FastAPI dependencies: database session, services and the calling principal.
"""

from typing import Generator, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from complaint_engine.config.database import get_db_session
from complaint_engine.repositories.user.user_repository import UserRepository
from complaint_engine.schemas.principal import Principal
from complaint_engine.services.base.notification_dispatcher import (
    NotificationDispatcher,
    get_notification_dispatcher,
)
from complaint_engine.services.base.service_factory import ServiceFactory


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for the request."""
    yield from get_db_session()


def get_dispatcher() -> NotificationDispatcher:
    return get_notification_dispatcher()


def get_service_factory(
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> ServiceFactory:
    return ServiceFactory(db, dispatcher)


def get_current_principal(
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
    db: Session = Depends(get_db),
) -> Principal:
    """
    Resolve the caller from the X-User-Id header.

    Token verification belongs to the authentication service; deployments
    override this dependency with one backed by their auth layer.
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    principal = UserRepository(db).resolve_principal(x_user_id)
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or not approved",
        )
    return principal
