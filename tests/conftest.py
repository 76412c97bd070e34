"""Pytest configuration and shared fixtures.

Every test gets a fresh application bound to a throwaway SQLite file, with
mail suppressed, notifications dispatched inline and the scheduling clock
pinned to ``NOW``.

HTTP tests must not hold an application context open: each test-client
request then pushes its own, so Flask-Login resolves the bearer token of
that request rather than reusing the previous caller.
"""

from datetime import datetime

import pytest

from mentorportal import create_app
from mentorportal.config import TestConfig
from mentorportal.extensions import db
from mentorportal.models.user import Role, User
from mentorportal.security import issue_token

NOW = datetime(2030, 1, 1, 12, 0, 0)


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def app(tmp_path):
    class _Config(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'portal.db'}"
        LOG_DIR = str(tmp_path / "logs")

    app = create_app(_Config)
    app.extensions["scheduling_engine"].clock = lambda: NOW
    app.extensions["schedule_query"].clock = lambda: NOW
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture
def app_ctx(app):
    """Hold an application context for service-level tests."""
    with app.app_context():
        yield app
        db.session.remove()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def engine(app_ctx):
    return app_ctx.extensions["scheduling_engine"]


@pytest.fixture
def queries(app_ctx):
    return app_ctx.extensions["schedule_query"]


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def make_user(app):
    """Factory persisting a user; returns a detached, fully loaded instance."""
    counter = {"n": 0}

    def _make(role: Role, email=None, first_name="Test", last_name="User",
              mentor=None, password="secret123") -> User:
        counter["n"] += 1
        with app.app_context():
            user = User(
                first_name=first_name,
                last_name=last_name,
                email=email or f"user{counter['n']}@example.com",
                role=role.value,
                assigned_mentor_id=mentor.id if mentor else None,
            )
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            db.session.refresh(user)
            db.session.expunge(user)
        return user

    return _make


@pytest.fixture
def mentor(make_user):
    return make_user(Role.MENTOR, "mentor@example.com", "Maya", "Okafor")


@pytest.fixture
def other_mentor(make_user):
    return make_user(Role.MENTOR, "other.mentor@example.com", "Omar", "Lind")


@pytest.fixture
def mentee(make_user, mentor):
    return make_user(Role.MENTEE, "mentee@example.com", "Milo", "Berg", mentor=mentor)


@pytest.fixture
def admin(make_user):
    return make_user(Role.ADMIN, "admin@example.com", "Ada", "Root")


@pytest.fixture
def auth_headers(app):
    """Build bearer headers for a user."""

    def _headers(user: User) -> dict[str, str]:
        with app.app_context():
            token = issue_token(user)
        return {"Authorization": f"Bearer {token}"}

    return _headers
