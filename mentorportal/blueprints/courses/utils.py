# mentorportal/blueprints/courses/utils.py
"""Lookups and ownership checks shared by the course, module and content routes."""
from flask_login import current_user

from ...exceptions import Forbidden, InvalidField, NotFound
from ...models.course import ContentItem, Course, Module
from ...security import Capability, can


def visible(course: Course) -> bool:
    """Drafts and archived courses are hidden from mentees."""
    return course.is_published or can(current_user.role, Capability.VIEW_UNPUBLISHED_COURSES)


def get_course_or_404(course_id: int) -> Course:
    course = Course.query.get(course_id)
    if not course or not visible(course):
        raise NotFound("Course not found")
    return course


def get_module_or_404(module_id: int) -> Module:
    module = Module.query.get(module_id)
    if not module or not visible(module.course):
        raise NotFound("Module not found")
    return module


def get_item_or_404(item_id: int) -> ContentItem:
    item = ContentItem.query.get(item_id)
    if not item or not visible(item.module.course):
        raise NotFound("Content item not found")
    return item


def ensure_owner(course: Course, what: str = "course"):
    if can(current_user.role, Capability.MANAGE_ANY_COURSE):
        return
    if course.mentor_id != current_user.id:
        raise Forbidden(f"User not authorized to modify this {what}")


def parse_order(value) -> int:
    if isinstance(value, bool):
        raise InvalidField("order must be a whole number")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidField("order must be a whole number")
        return int(value)
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidField("order must be a whole number")


def has_value(data: dict, key: str) -> bool:
    value = data.get(key)
    return value is not None and not (isinstance(value, str) and not value.strip())
