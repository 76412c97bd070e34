# mentorportal/blueprints/announcements/routes.py
import logging

from flask import jsonify, request
from flask_login import login_required, current_user
from sqlalchemy import or_

from ...exceptions import InvalidField, MissingField, NotFound
from ...extensions import db
from ...models.announcement import Announcement, TARGET_ALL
from ...models.user import Role
from ...security import roles_required
from ..forms import json_body, text_value
from . import announcements_bp

log = logging.getLogger(__name__)

VALID_TARGETS = {r.value for r in Role} | {TARGET_ALL}
DEFAULT_LIMIT = 10


@announcements_bp.post("")
@login_required
@roles_required(Role.ADMIN)
def announcement_create():
    data = json_body()
    title = text_value(data, "title")
    content = text_value(data, "content")
    targets = data.get("targetRoles")

    if not title or not content:
        raise MissingField("Please provide title and content")
    if len(title) > 200:
        raise InvalidField("Title cannot be more than 200 characters")
    if targets is not None:
        if isinstance(targets, str):
            targets = [targets]
        if not isinstance(targets, list) or not all(t in VALID_TARGETS for t in targets):
            raise InvalidField("Invalid target role specified")

    a = Announcement(title=title, content=content, author_id=current_user.id)
    a.target_roles = targets or [TARGET_ALL]
    db.session.add(a)
    db.session.commit()
    log.info("Announcement %s published by admin=%s for %s", a.id, current_user.id, a.target_roles_csv)
    return jsonify(a.to_dict()), 201


@announcements_bp.get("")
@login_required
def announcement_list():
    limit = request.args.get("limit", DEFAULT_LIMIT, type=int)
    if not limit or limit < 1:
        limit = DEFAULT_LIMIT
    role = current_user.role
    items = (
        Announcement.query
        .filter(or_(
            Announcement.target_roles_csv.contains(TARGET_ALL),
            Announcement.target_roles_csv.contains(role),
        ))
        .order_by(Announcement.created_at.desc(), Announcement.id.desc())
        .limit(limit)
        .all()
    )
    return jsonify([a.to_dict() for a in items])


@announcements_bp.delete("/<int:announcement_id>")
@login_required
@roles_required(Role.ADMIN)
def announcement_delete(announcement_id):
    a = Announcement.query.get(announcement_id)
    if not a:
        raise NotFound("Announcement not found")
    db.session.delete(a)
    db.session.commit()
    log.info("Announcement %s removed by admin=%s", announcement_id, current_user.id)
    return jsonify({"message": "Announcement removed"})
