# mentorportal/security.py
"""Bearer tokens, role gates and the per-role capability sets."""
import enum
import logging
from functools import wraps

from flask import current_app, request
from flask_login import current_user
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from .exceptions import Forbidden, Unauthorized
from .models.user import Role

log = logging.getLogger(__name__)


class Capability(enum.Enum):
    REQUEST_MEETING = "request_meeting"
    VIEW_OWN_SCHEDULE = "view_own_schedule"
    VIEW_ALL_SCHEDULES = "view_all_schedules"
    MANAGE_OWN_MEETINGS = "manage_own_meetings"
    MANAGE_ANY_MEETING = "manage_any_meeting"
    MANAGE_USERS = "manage_users"
    PUBLISH_ANNOUNCEMENTS = "publish_announcements"
    AUTHOR_COURSES = "author_courses"
    VIEW_UNPUBLISHED_COURSES = "view_unpublished_courses"
    MANAGE_ANY_COURSE = "manage_any_course"


ROLE_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.ADMIN: frozenset({
        Capability.VIEW_ALL_SCHEDULES,
        Capability.MANAGE_ANY_MEETING,
        Capability.MANAGE_USERS,
        Capability.PUBLISH_ANNOUNCEMENTS,
        Capability.VIEW_UNPUBLISHED_COURSES,
        Capability.MANAGE_ANY_COURSE,
    }),
    Role.MENTOR: frozenset({
        Capability.VIEW_OWN_SCHEDULE,
        Capability.MANAGE_OWN_MEETINGS,
        Capability.AUTHOR_COURSES,
        Capability.VIEW_UNPUBLISHED_COURSES,
    }),
    Role.MENTEE: frozenset({
        Capability.REQUEST_MEETING,
        Capability.VIEW_OWN_SCHEDULE,
    }),
}


def can(role, capability: Capability) -> bool:
    parsed = Role.parse(role) if role is not None else None
    if parsed is None:
        return False
    return capability in ROLE_CAPABILITIES.get(parsed, frozenset())


# -----------------
# Tokens
# -----------------

def _ts() -> URLSafeTimedSerializer:
    secret_key = current_app.config.get("SECRET_KEY")
    salt = current_app.config.get("TOKEN_SALT", "api-token")
    return URLSafeTimedSerializer(secret_key=secret_key, salt=salt)


def issue_token(user) -> str:
    return _ts().dumps({"uid": user.id, "role": user.role})


def verify_token(token: str, max_age: int | None = None) -> int | None:
    if max_age is None:
        max_age = int(current_app.config.get("TOKEN_MAX_AGE", 60 * 60 * 24))
    try:
        data = _ts().loads(token, max_age=max_age)
        return int(data.get("uid"))
    except (BadSignature, SignatureExpired, ValueError, TypeError, AttributeError):
        return None


def load_user_from_request(req):
    """Flask-Login request loader: resolve `Authorization: Bearer <token>`."""
    from .models.user import User

    header = req.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return None
    uid = verify_token(header.split(" ", 1)[1].strip())
    if uid is None:
        log.info("Rejected bearer token on %s", req.path)
        return None
    return User.query.get(uid)


# -----------------
# Route gates
# -----------------

def roles_required(*roles: Role):
    """Allow the wrapped view only for authenticated users holding one of ``roles``."""
    allowed = {Role.parse(r) for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            if not current_user.is_authenticated:
                raise Unauthorized("Not authorized, no token")
            if current_user.role_enum not in allowed:
                log.info("role %s denied on %s %s", current_user.role, request.method, request.path)
                raise Forbidden(f"User role '{current_user.role}' is not authorized to access this route")
            return view(*args, **kwargs)
        return wrapped
    return decorator
