# mentorportal/models/course.py
import enum
from datetime import datetime
from ..extensions import db
from .user import _iso

COURSE_TITLE_MAX_LENGTH = 150


class CourseStatus(str, enum.Enum):
    DRAFT = "Draft"
    PUBLISHED = "Published"
    ARCHIVED = "Archived"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip())
        except ValueError:
            return None


class ContentType(str, enum.Enum):
    LECTURE = "Lecture"
    VIDEO = "Video"
    RESOURCE = "Resource"
    TASK = "Task"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip())
        except ValueError:
            return None


class Course(db.Model):
    __tablename__ = "course"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(COURSE_TITLE_MAX_LENGTH), nullable=False)
    description = db.Column(db.Text, nullable=False)

    # Owning mentor; only they (or an admin) may edit the course tree
    mentor_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    mentor = db.relationship("User", foreign_keys=[mentor_id], lazy="joined")

    # Draft|Published|Archived
    status = db.Column(db.String(20), default=CourseStatus.DRAFT.value, nullable=False, index=True)

    modules = db.relationship(
        "Module",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="Module.order",
    )

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    @property
    def is_published(self) -> bool:
        return self.status == CourseStatus.PUBLISHED.value

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "title": self.title,
            "description": self.description,
            "mentor": self.mentor.display_dict() if self.mentor else self.mentor_id,
            "status": self.status,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }

    def __repr__(self):
        return f"<Course id={self.id} mentor={self.mentor_id} status={self.status}>"


class Module(db.Model):
    __tablename__ = "course_module"
    __table_args__ = (
        db.Index("ix_course_module_course_order", "course_id", "order"),
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    course_id = db.Column(db.Integer, db.ForeignKey("course.id", ondelete="CASCADE"), nullable=False)
    course = db.relationship("Course", back_populates="modules")
    order = db.Column(db.Integer, nullable=False)

    items = db.relationship(
        "ContentItem",
        back_populates="module",
        cascade="all, delete-orphan",
        order_by="ContentItem.order",
    )

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "title": self.title,
            "course": self.course_id,
            "order": self.order,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class ContentItem(db.Model):
    __tablename__ = "content_item"
    __table_args__ = (
        db.Index("ix_content_item_module_order", "module_id", "order"),
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    module_id = db.Column(db.Integer, db.ForeignKey("course_module.id", ondelete="CASCADE"), nullable=False)
    module = db.relationship("Module", back_populates="items")

    # Lecture|Video|Resource|Task; only the matching body column is filled
    item_type = db.Column(db.String(20), nullable=False)
    order = db.Column(db.Integer, nullable=False)
    lecture_content = db.Column(db.Text, nullable=True)
    video_url = db.Column(db.String(500), nullable=True)
    resource_url = db.Column(db.String(500), nullable=True)
    original_file_name = db.Column(db.String(255), nullable=True)
    task_description = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    @property
    def type_enum(self) -> ContentType | None:
        return ContentType.parse(self.item_type)

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "title": self.title,
            "module": self.module_id,
            "itemType": self.item_type,
            "order": self.order,
            "lectureContent": self.lecture_content,
            "videoUrl": self.video_url,
            "resourceUrl": self.resource_url,
            "originalFileName": self.original_file_name,
            "taskDescription": self.task_description,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }
