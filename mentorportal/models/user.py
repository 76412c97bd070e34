# mentorportal/models/user.py
import enum
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import UserMixin
from ..extensions import db


class Role(str, enum.Enum):
    ADMIN = "Admin"
    MENTOR = "Mentor"
    MENTEE = "Mentee"

    @classmethod
    def parse(cls, value):
        """Return the matching Role or None for anything outside the enumeration."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip())
        except ValueError:
            return None


class User(UserMixin, db.Model):
    __tablename__ = "user"

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(120), nullable=False)
    last_name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)

    password_hash = db.Column(db.String(255))

    # Admin|Mentor|Mentee
    role = db.Column(db.String(20), nullable=False, default=Role.MENTEE.value, index=True)

    # Mentees only: the mentor meeting requests are routed to
    assigned_mentor_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="SET NULL"), index=True)
    assigned_mentor = db.relationship(
        "User",
        remote_side=[id],
        backref=db.backref("assigned_mentees", lazy="selectin"),
    )

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # --- Auth helpers ---
    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def role_enum(self) -> Role | None:
        return Role.parse(self.role)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def has_role(self, *roles: Role) -> bool:
        return self.role_enum in roles

    def display_dict(self) -> dict:
        return {
            "_id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
        }

    def to_dict(self) -> dict:
        return {
            **self.display_dict(),
            "role": self.role,
            "assignedMentorId": self.assigned_mentor_id,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }

    def __repr__(self):
        return f"<User id={self.id} email={self.email} role={self.role}>"


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
