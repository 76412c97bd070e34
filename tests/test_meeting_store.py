"""Unit tests for the meeting request store and the error surface."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from mentorportal.exceptions import DependencyFailure
from mentorportal.models.meeting import MeetingRequest
from mentorportal.services.meeting_store import MeetingRequestStore


@pytest.fixture
def broken_db():
    db = MagicMock()
    db.session.commit.side_effect = OperationalError("INSERT", {}, Exception("disk I/O error"))
    return db


def test_failed_write_rolls_back_and_raises(app_ctx, broken_db):
    store = MeetingRequestStore(broken_db)
    with pytest.raises(DependencyFailure):
        store.add(MeetingRequest())
    broken_db.session.rollback.assert_called_once()


def test_get_with_non_numeric_id(app_ctx):
    from mentorportal.extensions import db
    assert MeetingRequestStore(db).get("abc") is None


def test_dependency_failure_does_not_leak_details(app, client, auth_headers, mentee, broken_db):
    engine = app.extensions["scheduling_engine"]
    engine.store = MeetingRequestStore(broken_db)
    engine.notifier = MagicMock()

    r = client.post("/api/v1/schedules/request", headers=auth_headers(mentee),
                    json={"requestedTime": "2030-06-01T10:00:00", "durationMinutes": 30})

    assert r.status_code == 500
    assert r.get_json() == {"error": "DependencyFailure", "message": "Server error."}
    engine.notifier.send_meeting_request_email.assert_not_called()
