# Test configuration and fixtures
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

import pytest

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_TO_FILE", "false")

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from complaint_engine.config.database import init_db
from complaint_engine.config.settings import Settings
from complaint_engine.models.base.enums import (
    ComplaintCategory,
    ResourceStatus,
    ResourceType,
    UserRole,
    UserStatus,
)
from complaint_engine.models.resource.resource import Resource
from complaint_engine.models.user.user import User
from complaint_engine.schemas.principal import Principal
from complaint_engine.services.base.notification_dispatcher import NotificationDispatcher, NotificationGateway
from complaint_engine.services.base.service_factory import ServiceFactory

FIXED_NOW = datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)


class RecordingGateway(NotificationGateway):
    """Gateway that remembers every send; can be told to fail."""

    def __init__(self):
        self.sent: List[Dict[str, Any]] = []
        self.fail_with: Exception = None
        self.return_value = True

    def send(self, recipient_id, title, message, event_type, payload) -> bool:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(
            {
                "recipient_id": recipient_id,
                "title": title,
                "message": message,
                "event_type": event_type,
                "payload": payload,
            }
        )
        return self.return_value

    def titles_for(self, recipient_id: str) -> List[str]:
        return [n["title"] for n in self.sent if n["recipient_id"] == recipient_id]


@pytest.fixture
def settings():
    return Settings(
        LOG_TO_FILE=False,
        FEEDBACK_CLOSE_THRESHOLD=3,
        APPELLATE_AUTHORITY_STRATEGY="first_approved",
        NOTIFICATION_DISPATCH_MODE="inline",
        TRANSITION_MAX_RETRIES=3,
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def gateway():
    return RecordingGateway()


@pytest.fixture
def dispatcher(gateway):
    return NotificationDispatcher(gateway, mode="inline")


def _user(name, role, department=None, status=UserStatus.APPROVED, offset=0):
    created = FIXED_NOW - timedelta(days=30) + timedelta(minutes=offset)
    return User(
        name=name,
        email=f"{name.lower().replace(' ', '.')}@example.org",
        role=role,
        department=department,
        status=status,
        created_at=created,
        updated_at=created,
    )


@pytest.fixture
def users(db_session) -> Dict[str, User]:
    """Approved users for every role plus a few edge cases."""
    seeded = {
        "resident": _user("Asha Resident", UserRole.RESIDENT, offset=1),
        "other_resident": _user("Ravi Resident", UserRole.RESIDENT, offset=2),
        "electrical_admin": _user("Elec Admin", UserRole.DEPARTMENT_ADMIN, ComplaintCategory.ELECTRICAL, offset=3),
        "civil_admin": _user("Civil Admin", UserRole.DEPARTMENT_ADMIN, ComplaintCategory.CIVIL, offset=4),
        "staff": _user("Sam Staff", UserRole.MAINTENANCE_STAFF, ComplaintCategory.ELECTRICAL, offset=5),
        "other_staff": _user("Olu Staff", UserRole.MAINTENANCE_STAFF, ComplaintCategory.ELECTRICAL, offset=6),
        "super_admin": _user("Super One", UserRole.SUPER_ADMIN, offset=7),
        "second_super_admin": _user("Super Two", UserRole.SUPER_ADMIN, offset=8),
        "pending_staff": _user("Pending Staff", UserRole.MAINTENANCE_STAFF, status=UserStatus.PENDING, offset=9),
    }
    db_session.add_all(seeded.values())
    db_session.commit()
    return seeded


@pytest.fixture
def resources(db_session) -> Dict[str, Resource]:
    seeded = {
        "quarter": Resource(
            resource_code="Q-101",
            resource_type=ResourceType.PERSONAL,
            resource_name="Quarter 101",
            resource_category="Type II",
            status=ResourceStatus.ACTIVE,
        ),
        "park": Resource(
            resource_code="PARK-1",
            resource_type=ResourceType.GENERAL,
            resource_name="Central Park",
            status=ResourceStatus.ACTIVE,
        ),
        "closed_office": Resource(
            resource_code="OFF-9",
            resource_type=ResourceType.FUNCTIONAL,
            resource_name="Old Office",
            status=ResourceStatus.INACTIVE,
        ),
    }
    db_session.add_all(seeded.values())
    db_session.commit()
    return seeded


@pytest.fixture
def principals(users) -> Dict[str, Principal]:
    return {key: Principal.from_user(user) for key, user in users.items()}


@pytest.fixture
def services(db_session, dispatcher, settings, users, resources, monkeypatch) -> ServiceFactory:
    factory = ServiceFactory(db_session, dispatcher, settings)
    monkeypatch.setattr(factory.complaints(), "now", lambda: FIXED_NOW)
    return factory


@pytest.fixture
def submit(services, principals, resources):
    """Submit a complaint as the default resident and return its detail."""

    def _submit(principal=None, category="Electrical", subcategory="Lighting", **overrides):
        payload = {
            "resource_id": resources["quarter"].id,
            "category": category,
            "subcategory": subcategory,
            "description": "Corridor light is not working",
            "images": [],
        }
        payload.update(overrides)
        result = services.complaints().submit_complaint(principal or principals["resident"], payload)
        assert result.is_success, result.error
        return result.data

    return _submit


@pytest.fixture
def advance(services, principals, users):
    """Drive a complaint through the lifecycle up to the requested status."""

    def _advance(complaint_id: str, to: str):
        steps = ["assigned", "staffed", "resolved"]
        for step in steps[: steps.index(to) + 1]:
            if step == "assigned":
                result = services.assignment().assign_to_agency(
                    principals["electrical_admin"], complaint_id, users["electrical_admin"].id
                )
            elif step == "staffed":
                result = services.assignment().assign_to_staff(
                    principals["electrical_admin"], complaint_id, users["staff"].id
                )
            else:
                result = services.resolution().resolve(principals["staff"], complaint_id, "Replaced the bulb")
            assert result.is_success, result.error
        return result.data

    return _advance
