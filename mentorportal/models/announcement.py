# mentorportal/models/announcement.py
from datetime import datetime
from ..extensions import db
from .user import _iso

TARGET_ALL = "All"


class Announcement(db.Model):
    __tablename__ = "announcement"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False)

    author_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    author = db.relationship("User", foreign_keys=[author_id], lazy="joined")

    # Comma separated subset of Admin|Mentor|Mentee|All
    target_roles_csv = db.Column(db.String(80), nullable=False, default=TARGET_ALL)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    @property
    def target_roles(self) -> list[str]:
        return [r for r in (self.target_roles_csv or "").split(",") if r]

    @target_roles.setter
    def target_roles(self, roles):
        self.target_roles_csv = ",".join(roles) if roles else TARGET_ALL

    def to_dict(self) -> dict:
        author = None
        if self.author:
            author = {"_id": self.author.id, "firstName": self.author.first_name, "lastName": self.author.last_name}
        return {
            "_id": self.id,
            "title": self.title,
            "content": self.content,
            "author": author,
            "targetRoles": self.target_roles,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }
