# mentorportal/blueprints/courses/content.py
import logging

from flask import jsonify
from flask_login import login_required, current_user

from ...exceptions import InvalidField, MissingField
from ...extensions import db
from ...models.course import ContentItem, ContentType
from ...models.user import Role
from ...security import roles_required
from ..forms import json_body, text_value
from . import courses_bp
from .utils import ensure_owner, get_item_or_404, get_module_or_404, has_value, parse_order

log = logging.getLogger(__name__)

# itemType -> (JSON key, column, required on create)
TYPE_FIELDS = {
    ContentType.LECTURE: ("lectureContent", "lecture_content", True),
    ContentType.VIDEO: ("videoUrl", "video_url", True),
    ContentType.RESOURCE: ("resourceUrl", "resource_url", False),
    ContentType.TASK: ("taskDescription", "task_description", True),
}


def _apply_body(item: ContentItem, kind: ContentType, data: dict, creating: bool):
    """Write the body column that belongs to ``kind``; other type fields are ignored."""
    key, column, required = TYPE_FIELDS[kind]
    value = text_value(data, key)
    if value:
        setattr(item, column, value)
    elif creating and required:
        raise MissingField(f"{key} is required for {kind.value} items")
    if kind is ContentType.RESOURCE:
        name = text_value(data, "originalFileName")
        if name:
            item.original_file_name = name


@courses_bp.post("/modules/<int:module_id>/content-items")
@login_required
@roles_required(Role.MENTOR, Role.ADMIN)
def content_item_create(module_id):
    module = get_module_or_404(module_id)
    ensure_owner(module.course, "module")
    data = json_body()

    title = text_value(data, "title")
    if not title or not has_value(data, "itemType") or not has_value(data, "order"):
        raise MissingField("Please provide title, itemType, and order")
    kind = ContentType.parse(data.get("itemType"))
    if kind is None:
        raise InvalidField("Invalid itemType")

    item = ContentItem(title=title, item_type=kind.value, order=parse_order(data.get("order")), module_id=module.id)
    _apply_body(item, kind, data, creating=True)
    db.session.add(item)
    db.session.commit()
    log.info("Content item %s (%s) added to module=%s by user=%s", item.id, kind.value, module.id, current_user.id)
    return jsonify(item.to_dict()), 201


@courses_bp.get("/modules/<int:module_id>/content-items")
@login_required
def content_item_list(module_id):
    module = get_module_or_404(module_id)
    items = ContentItem.query.filter_by(module_id=module.id).order_by(ContentItem.order, ContentItem.id).all()
    return jsonify([i.to_dict() for i in items])


@courses_bp.get("/content-items/<int:item_id>")
@login_required
def content_item_detail(item_id):
    return jsonify(get_item_or_404(item_id).to_dict())


@courses_bp.put("/content-items/<int:item_id>")
@login_required
@roles_required(Role.MENTOR, Role.ADMIN)
def content_item_update(item_id):
    item = get_item_or_404(item_id)
    ensure_owner(item.module.course, "content item")
    data = json_body()

    title = text_value(data, "title")
    if title:
        item.title = title
    if has_value(data, "order"):
        item.order = parse_order(data.get("order"))
    _apply_body(item, item.type_enum, data, creating=False)

    db.session.commit()
    log.info("Content item %s updated by user=%s", item.id, current_user.id)
    return jsonify(item.to_dict())


@courses_bp.put("/content-items/<int:item_id>/upload-resource")
@login_required
@roles_required(Role.MENTOR, Role.ADMIN)
def content_item_attach_resource(item_id):
    """Record where a Resource item's file lives; the file itself is stored elsewhere."""
    item = get_item_or_404(item_id)
    ensure_owner(item.module.course, "content item")
    if item.type_enum is not ContentType.RESOURCE:
        raise InvalidField("Resources can only be attached to Resource items")
    data = json_body()
    url = text_value(data, "resourceUrl")
    if not url:
        raise MissingField("Please provide resourceUrl")

    item.resource_url = url
    item.original_file_name = text_value(data, "originalFileName") or None
    db.session.commit()
    log.info("Resource attached to content item %s by user=%s", item.id, current_user.id)
    return jsonify(item.to_dict())


@courses_bp.delete("/content-items/<int:item_id>")
@login_required
@roles_required(Role.MENTOR, Role.ADMIN)
def content_item_delete(item_id):
    item = get_item_or_404(item_id)
    ensure_owner(item.module.course, "content item")
    db.session.delete(item)
    db.session.commit()
    log.info("Content item %s removed by user=%s", item_id, current_user.id)
    return jsonify({"message": "Content item removed"})
