# mentorportal/blueprints/admin/users.py
import logging

from flask import jsonify, request
from flask_login import login_required, current_user

from ...exceptions import Conflict, InvalidField, NotFound
from ...extensions import db
from ...models.course import Course
from ...models.meeting import MeetingRequest
from ...models.user import User, Role
from ...security import roles_required
from ...services.directory import UserDirectory
from ..auth.forms import UserCreateForm, UserUpdateForm
from ..forms import json_body
from . import admin_bp

log = logging.getLogger(__name__)


def _get_user_or_404(user_id: int) -> User:
    user = UserDirectory().find_by_id(user_id)
    if not user:
        raise NotFound("User not found")
    return user


def _apply_mentor_assignment(user: User, mentor_id):
    """Link a mentee to a mentor; ``None`` clears the link."""
    if mentor_id in (None, ""):
        user.assigned_mentor_id = None
        return
    if user.role_enum is not Role.MENTEE:
        raise InvalidField("Only mentees can have an assigned mentor")
    try:
        mentor_id = int(mentor_id)
    except (TypeError, ValueError):
        raise InvalidField("assignedMentorId must reference a mentor")
    mentor = UserDirectory().find_by_id(mentor_id)
    if not mentor or mentor.role_enum is not Role.MENTOR or mentor.id == user.id:
        raise InvalidField("assignedMentorId must reference a mentor")
    user.assigned_mentor_id = mentor.id


@admin_bp.get("")
@login_required
@roles_required(Role.ADMIN)
def users_list():
    q = User.query
    role = (request.args.get("role") or "").strip()
    if role:
        q = q.filter(User.role == role)
    users = q.order_by(User.created_at.desc(), User.id.desc()).all()
    return jsonify([u.to_dict() for u in users])


@admin_bp.get("/<int:user_id>")
@login_required
@roles_required(Role.ADMIN)
def user_detail(user_id):
    return jsonify(_get_user_or_404(user_id).to_dict())


@admin_bp.post("")
@login_required
@roles_required(Role.ADMIN)
def user_create():
    form = UserCreateForm()
    form.validate_or_raise("Please provide all required fields (firstName, lastName, email, password, role)")

    email = form.email.data.strip().lower()
    if UserDirectory().find_by_email(email):
        raise Conflict("User already exists with this email")

    user = User(
        first_name=form.firstName.data.strip(),
        last_name=form.lastName.data.strip(),
        email=email,
        role=form.role.data,
    )
    user.set_password(form.password.data)
    if form.assignedMentorId.data is not None:
        _apply_mentor_assignment(user, form.assignedMentorId.data)
    db.session.add(user)
    db.session.commit()
    log.info("Admin %s created user id=%s role=%s", current_user.id, user.id, user.role)
    return jsonify(user.to_dict()), 201


@admin_bp.put("/<int:user_id>")
@login_required
@roles_required(Role.ADMIN)
def user_update(user_id):
    user = _get_user_or_404(user_id)
    form = UserUpdateForm()
    form.validate_or_raise()
    payload = json_body()

    if form.firstName.data:
        user.first_name = form.firstName.data.strip()
    if form.lastName.data:
        user.last_name = form.lastName.data.strip()
    if form.role.data:
        user.role = form.role.data
        if user.role_enum is not Role.MENTEE:
            user.assigned_mentor_id = None

    email = (form.email.data or "").strip().lower()
    if email and email != user.email:
        if UserDirectory().find_by_email(email):
            raise Conflict("Email address is already registered")
        user.email = email

    if form.password.data:
        user.set_password(form.password.data)

    if "assignedMentorId" in payload:
        _apply_mentor_assignment(user, payload.get("assignedMentorId"))

    db.session.commit()
    log.info("Admin %s updated user id=%s", current_user.id, user.id)
    return jsonify(user.to_dict())


@admin_bp.delete("/<int:user_id>")
@login_required
@roles_required(Role.ADMIN)
def user_delete(user_id):
    user = _get_user_or_404(user_id)
    # Meeting records are never physically deleted, so neither are their parties
    has_meetings = MeetingRequest.query.filter(
        (MeetingRequest.mentee_id == user.id) | (MeetingRequest.mentor_id == user.id)
    ).first()
    if has_meetings:
        raise Conflict("User has meeting requests and cannot be removed")
    if Course.query.filter_by(mentor_id=user.id).first():
        raise Conflict("User owns courses and cannot be removed")

    for mentee in list(user.assigned_mentees or []):
        mentee.assigned_mentor_id = None
    db.session.delete(user)
    db.session.commit()
    log.info("Admin %s deleted user id=%s", current_user.id, user_id)
    return jsonify({"message": "User removed successfully"})
