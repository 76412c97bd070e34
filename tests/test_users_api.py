"""HTTP tests for the admin user directory at /api/v1/users."""

from datetime import timedelta

import pytest

from mentorportal.models.user import Role
from tests.conftest import NOW


@pytest.fixture
def as_admin(auth_headers, admin):
    return auth_headers(admin)


def test_non_admin_is_forbidden(client, auth_headers, mentor):
    r = client.get("/api/v1/users", headers=auth_headers(mentor))
    assert r.status_code == 403


def test_list_and_filter_by_role(client, as_admin, mentor, mentee):
    everyone = client.get("/api/v1/users", headers=as_admin).get_json()
    assert {u["email"] for u in everyone} == {"admin@example.com", "mentor@example.com", "mentee@example.com"}

    mentors = client.get("/api/v1/users?role=Mentor", headers=as_admin).get_json()
    assert [u["_id"] for u in mentors] == [mentor.id]


def test_detail_and_missing(client, as_admin, mentee, mentor):
    r = client.get(f"/api/v1/users/{mentee.id}", headers=as_admin)
    assert r.status_code == 200
    assert r.get_json()["assignedMentorId"] == mentor.id
    assert client.get("/api/v1/users/9999", headers=as_admin).status_code == 404


def test_create_mentee_with_mentor(client, as_admin, mentor):
    r = client.post("/api/v1/users", headers=as_admin, json={
        "firstName": "Lena", "lastName": "Park", "email": "lena@example.com",
        "password": "secret123", "role": "Mentee", "assignedMentorId": mentor.id,
    })
    assert r.status_code == 201
    assert r.get_json()["assignedMentorId"] == mentor.id


def test_create_rejects_non_mentor_assignment(client, as_admin, admin):
    r = client.post("/api/v1/users", headers=as_admin, json={
        "firstName": "Lena", "lastName": "Park", "email": "lena@example.com",
        "password": "secret123", "role": "Mentee", "assignedMentorId": admin.id,
    })
    assert r.status_code == 400
    assert r.get_json()["error"] == "InvalidField"


def test_create_validation(client, as_admin):
    r = client.post("/api/v1/users", headers=as_admin, json={"firstName": "Lena"})
    assert r.status_code == 400
    assert r.get_json()["error"] == "MissingField"

    r = client.post("/api/v1/users", headers=as_admin, json={
        "firstName": "Lena", "lastName": "Park", "email": "lena@example.com",
        "password": "secret123", "role": "Owner",
    })
    assert r.status_code == 400


def test_create_duplicate_email(client, as_admin, mentor):
    r = client.post("/api/v1/users", headers=as_admin, json={
        "firstName": "Dup", "lastName": "User", "email": "MENTOR@example.com",
        "password": "secret123", "role": "Mentor",
    })
    assert r.status_code == 400
    assert r.get_json()["error"] == "Conflict"


def test_update_fields_and_reassign(client, as_admin, mentee, other_mentor):
    r = client.put(f"/api/v1/users/{mentee.id}", headers=as_admin, json={
        "firstName": "Milan", "assignedMentorId": other_mentor.id,
    })
    assert r.status_code == 200
    data = r.get_json()
    assert data["firstName"] == "Milan"
    assert data["lastName"] == "Berg"
    assert data["assignedMentorId"] == other_mentor.id


def test_update_clears_assignment(client, as_admin, mentee):
    r = client.put(f"/api/v1/users/{mentee.id}", headers=as_admin, json={"assignedMentorId": None})
    assert r.get_json()["assignedMentorId"] is None


def test_role_change_drops_assignment(client, as_admin, mentee):
    r = client.put(f"/api/v1/users/{mentee.id}", headers=as_admin, json={"role": "Mentor"})
    assert r.get_json()["role"] == "Mentor"
    assert r.get_json()["assignedMentorId"] is None


def test_update_email_conflict(client, as_admin, mentee, mentor):
    r = client.put(f"/api/v1/users/{mentee.id}", headers=as_admin, json={"email": "mentor@example.com"})
    assert r.status_code == 400
    assert r.get_json()["error"] == "Conflict"


def test_update_array_body(client, as_admin, mentee):
    r = client.put(f"/api/v1/users/{mentee.id}", headers=as_admin, json=[{"firstName": "Mo"}])
    assert r.status_code == 400
    assert r.get_json()["error"] == "InvalidField"


def test_update_password_allows_login(client, as_admin, mentee):
    client.put(f"/api/v1/users/{mentee.id}", headers=as_admin, json={"password": "brand-new-pw"})
    r = client.post("/api/v1/auth/login", json={"email": "mentee@example.com", "password": "brand-new-pw"})
    assert r.status_code == 200


def test_delete(client, as_admin, make_user):
    spare = make_user(Role.MENTOR)
    r = client.delete(f"/api/v1/users/{spare.id}", headers=as_admin)
    assert r.status_code == 200
    assert client.get(f"/api/v1/users/{spare.id}", headers=as_admin).status_code == 404
    assert client.delete(f"/api/v1/users/{spare.id}", headers=as_admin).status_code == 404


def test_delete_refused_for_meeting_party(client, as_admin, auth_headers, mentee, app):
    from unittest.mock import MagicMock
    app.extensions["scheduling_engine"].notifier = MagicMock()
    client.post("/api/v1/schedules/request", headers=auth_headers(mentee), json={
        "requestedTime": (NOW + timedelta(hours=1)).isoformat(), "durationMinutes": 30,
    })
    r = client.delete(f"/api/v1/users/{mentee.id}", headers=as_admin)
    assert r.status_code == 400
    assert r.get_json()["error"] == "Conflict"
