# mentorportal/blueprints/courses/courses.py
import logging

from flask import jsonify, request
from flask_login import login_required, current_user

from ...exceptions import InvalidField, MissingField
from ...extensions import db
from ...models.course import COURSE_TITLE_MAX_LENGTH, Course, CourseStatus
from ...models.user import Role
from ...security import Capability, can, roles_required
from ..forms import json_body, text_value
from . import courses_bp
from .utils import ensure_owner, get_course_or_404

log = logging.getLogger(__name__)


def _status(value) -> str:
    status = CourseStatus.parse(value)
    if status is None:
        raise InvalidField("Invalid course status")
    return status.value


@courses_bp.post("/courses")
@login_required
@roles_required(Role.MENTOR)
def course_create():
    data = json_body()
    title = text_value(data, "title")
    description = text_value(data, "description")
    if not title or not description:
        raise MissingField("Please provide title and description")
    if len(title) > COURSE_TITLE_MAX_LENGTH:
        raise InvalidField(f"Title cannot be more than {COURSE_TITLE_MAX_LENGTH} characters")

    course = Course(title=title, description=description, mentor_id=current_user.id)
    if data.get("status") is not None:
        course.status = _status(data.get("status"))
    db.session.add(course)
    db.session.commit()
    log.info("Course %s created by mentor=%s", course.id, current_user.id)
    return jsonify(course.to_dict()), 201


@courses_bp.get("/courses")
@login_required
def course_list():
    query = Course.query
    if not can(current_user.role, Capability.VIEW_UNPUBLISHED_COURSES):
        query = query.filter(Course.status == CourseStatus.PUBLISHED.value)
    mentor_id = request.args.get("mentorId", type=int)
    if mentor_id is not None:
        query = query.filter(Course.mentor_id == mentor_id)
    courses = query.order_by(Course.created_at.desc(), Course.id.desc()).all()
    return jsonify([c.to_dict() for c in courses])


@courses_bp.get("/courses/<int:course_id>")
@login_required
def course_detail(course_id):
    return jsonify(get_course_or_404(course_id).to_dict())


@courses_bp.put("/courses/<int:course_id>")
@login_required
@roles_required(Role.MENTOR, Role.ADMIN)
def course_update(course_id):
    course = get_course_or_404(course_id)
    ensure_owner(course)
    data = json_body()

    title = text_value(data, "title")
    if title:
        if len(title) > COURSE_TITLE_MAX_LENGTH:
            raise InvalidField(f"Title cannot be more than {COURSE_TITLE_MAX_LENGTH} characters")
        course.title = title
    description = text_value(data, "description")
    if description:
        course.description = description
    if data.get("status") not in (None, ""):
        course.status = _status(data.get("status"))

    db.session.commit()
    log.info("Course %s updated by user=%s", course.id, current_user.id)
    return jsonify(course.to_dict())


@courses_bp.delete("/courses/<int:course_id>")
@login_required
@roles_required(Role.MENTOR, Role.ADMIN)
def course_delete(course_id):
    course = get_course_or_404(course_id)
    ensure_owner(course)
    # modules and their content items go with the course
    db.session.delete(course)
    db.session.commit()
    log.info("Course %s removed by user=%s", course_id, current_user.id)
    return jsonify({"message": "Course removed"})
