# mentorportal/blueprints/courses/modules.py
import logging

from flask import jsonify
from flask_login import login_required, current_user

from ...exceptions import MissingField
from ...extensions import db
from ...models.course import Module
from ...models.user import Role
from ...security import roles_required
from ..forms import json_body, text_value
from . import courses_bp
from .utils import ensure_owner, get_course_or_404, get_module_or_404, has_value, parse_order

log = logging.getLogger(__name__)


@courses_bp.post("/courses/<int:course_id>/modules")
@login_required
@roles_required(Role.MENTOR, Role.ADMIN)
def module_create(course_id):
    data = json_body()
    title = text_value(data, "title")
    if not title or not has_value(data, "order"):
        raise MissingField("Please provide title and order for the module")
    order = parse_order(data.get("order"))

    course = get_course_or_404(course_id)
    ensure_owner(course, "course to add modules")

    module = Module(title=title, order=order, course_id=course.id)
    db.session.add(module)
    db.session.commit()
    log.info("Module %s added to course=%s by user=%s", module.id, course.id, current_user.id)
    return jsonify(module.to_dict()), 201


@courses_bp.get("/courses/<int:course_id>/modules")
@login_required
def module_list(course_id):
    course = get_course_or_404(course_id)
    modules = Module.query.filter_by(course_id=course.id).order_by(Module.order, Module.id).all()
    return jsonify([m.to_dict() for m in modules])


@courses_bp.get("/modules/<int:module_id>")
@login_required
def module_detail(module_id):
    return jsonify(get_module_or_404(module_id).to_dict())


@courses_bp.put("/modules/<int:module_id>")
@login_required
@roles_required(Role.MENTOR, Role.ADMIN)
def module_update(module_id):
    module = get_module_or_404(module_id)
    ensure_owner(module.course, "module")
    data = json_body()

    title = text_value(data, "title")
    if title:
        module.title = title
    if has_value(data, "order"):
        module.order = parse_order(data.get("order"))

    db.session.commit()
    log.info("Module %s updated by user=%s", module.id, current_user.id)
    return jsonify(module.to_dict())


@courses_bp.delete("/modules/<int:module_id>")
@login_required
@roles_required(Role.MENTOR, Role.ADMIN)
def module_delete(module_id):
    module = get_module_or_404(module_id)
    ensure_owner(module.course, "module")
    db.session.delete(module)
    db.session.commit()
    log.info("Module %s removed by user=%s", module_id, current_user.id)
    return jsonify({"message": "Module removed"})
