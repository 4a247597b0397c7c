import re

import pytest
from fastapi.testclient import TestClient

from complaint_engine.api.deps import get_db, get_dispatcher
from complaint_engine.main import create_app

BASE = "/api/v1/complaints"


@pytest.fixture
def client(settings, db_session, dispatcher, users, resources):
    app = create_app(settings)
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    return TestClient(app)


@pytest.fixture
def as_user(users):
    def _headers(key):
        return {"X-User-Id": users[key].id}

    return _headers


@pytest.fixture
def created(client, as_user, resources):
    response = client.post(
        BASE,
        json={
            "resourceId": resources["quarter"].id,
            "category": "Electrical",
            "subcategory": "Lighting",
            "description": "Corridor light is not working",
        },
        headers=as_user("resident"),
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_create_complaint(created, users):
    assert re.match(r"^CMP-\d{2}-\d{2}-0001$", created["complaint_number"])
    assert created["status"] == "pending"
    assert created["reporter_id"] == users["resident"].id
    assert len(created["history"]) == 1


def test_missing_principal_is_unauthorized(client):
    response = client.get(BASE)

    assert response.status_code == 401
    assert response.json()["success"] is False
    assert response.json()["code"] == "UNAUTHORIZED"


def test_pending_user_is_unauthorized(client, as_user):
    response = client.get(BASE, headers=as_user("pending_staff"))

    assert response.status_code == 401


def test_invalid_body_is_validation_error(client, as_user, resources):
    response = client.post(
        BASE,
        json={"resourceId": resources["quarter"].id, "category": "Electrical"},
        headers=as_user("resident"),
    )

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert "subcategory" in body["details"]["field_errors"]


def test_full_lifecycle_over_http(client, as_user, created, users):
    complaint_id = created["id"]

    response = client.put(
        f"{BASE}/{complaint_id}/assign",
        json={"agencyId": users["electrical_admin"].id},
        headers=as_user("electrical_admin"),
    )
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "assigned"

    response = client.put(
        f"{BASE}/{complaint_id}/assign-staff",
        json={"staffId": users["staff"].id},
        headers=as_user("electrical_admin"),
    )
    assert response.json()["data"]["assigned_staff_id"] == users["staff"].id

    response = client.put(
        f"{BASE}/{complaint_id}/resolve",
        json={"resolutionNotes": "Replaced the bulb"},
        headers=as_user("staff"),
    )
    assert response.json()["data"]["status"] == "resolved"

    response = client.put(
        f"{BASE}/{complaint_id}/feedback",
        json={"rating": 2, "comment": "flickers again"},
        headers=as_user("resident"),
    )
    assert response.json()["data"]["status"] == "escalated"
    assert response.json()["message"] == "Feedback submitted and complaint escalated"

    response = client.put(
        f"{BASE}/{complaint_id}/final-resolution",
        json={"resolution": "Rewired the corridor"},
        headers=as_user("super_admin"),
    )
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "finalResolution"

    history = client.get(f"{BASE}/{complaint_id}/history", headers=as_user("resident")).json()["data"]
    assert [entry["sequence"] for entry in history] == [1, 2, 3, 4, 5, 6]


def test_invalid_transition_is_conflict(client, as_user, created):
    response = client.put(
        f"{BASE}/{created['id']}/resolve",
        json={"resolutionNotes": "Too early"},
        headers=as_user("electrical_admin"),
    )

    assert response.status_code == 409
    assert response.json()["code"] == "INVALID_STATE"


def test_forbidden_action(client, as_user, created):
    response = client.put(
        f"{BASE}/{created['id']}/final-resolution",
        json={"resolution": "nope"},
        headers=as_user("resident"),
    )

    assert response.status_code == 403
    assert response.json()["code"] == "INSUFFICIENT_PERMISSIONS"


def test_unknown_complaint(client, as_user):
    response = client.get(f"{BASE}/does-not-exist", headers=as_user("super_admin"))

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_rating_out_of_range(client, as_user, created):
    response = client.put(
        f"{BASE}/{created['id']}/feedback",
        json={"rating": 9},
        headers=as_user("resident"),
    )

    assert response.status_code == 400


def test_listing_is_scoped(client, as_user, created):
    own = client.get(BASE, headers=as_user("resident")).json()["data"]
    other = client.get(BASE, headers=as_user("civil_admin")).json()["data"]

    assert own["total_count"] == 1
    assert own["items"][0]["id"] == created["id"]
    assert other["total_count"] == 0


def test_categories(client, as_user):
    response = client.get(f"{BASE}/categories", headers=as_user("resident"))

    assert set(response.json()["data"]) == {"Electrical", "Civil", "Misc"}


def test_subcategories(client, as_user):
    ok = client.get(f"{BASE}/subcategories/Civil", headers=as_user("resident"))
    bad = client.get(f"{BASE}/subcategories/Aerospace", headers=as_user("resident"))

    assert "Plumbing" in ok.json()["data"]
    assert bad.status_code == 400


def test_stats_and_distribution(client, as_user, created):
    stats = client.get(f"{BASE}/stats", headers=as_user("super_admin")).json()["data"]
    distribution = client.get(f"{BASE}/category-distribution", headers=as_user("super_admin")).json()["data"]

    assert stats["total"] == 1
    assert stats["pending"] == 1
    assert distribution == [{"category": "Electrical", "count": 1}]
