# mentorportal/models/meeting.py
import enum
from datetime import datetime
from ..extensions import db
from .user import _iso


class MeetingStatus(str, enum.Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    REJECTED = "Rejected"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip())
        except ValueError:
            return None


TERMINAL_STATUSES = frozenset({MeetingStatus.REJECTED, MeetingStatus.COMPLETED, MeetingStatus.CANCELLED})

MESSAGE_MAX_LENGTH = 500
DEFAULT_DURATION_MINUTES = 30


class MeetingRequest(db.Model):
    __tablename__ = "meeting_request"
    __table_args__ = (
        db.Index("ix_meeting_request_mentee_status", "mentee_id", "status"),
        db.Index("ix_meeting_request_mentor_status", "mentor_id", "status"),
        db.CheckConstraint("mentee_id <> mentor_id", name="ck_meeting_request_distinct_parties"),
    )

    id = db.Column(db.Integer, primary_key=True)

    # Parties; fixed at creation
    mentee_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False)
    mentor_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False)
    mentee = db.relationship("User", foreign_keys=[mentee_id], lazy="joined")
    mentor = db.relationship("User", foreign_keys=[mentor_id], lazy="joined")

    requested_time = db.Column(db.DateTime, nullable=False, index=True)  # store in UTC
    duration_minutes = db.Column(db.Integer, nullable=False, default=DEFAULT_DURATION_MINUTES)
    message = db.Column(db.String(MESSAGE_MAX_LENGTH), nullable=True)

    # Pending|Confirmed|Rejected|Completed|Cancelled
    status = db.Column(db.String(20), default=MeetingStatus.PENDING.value, nullable=False, index=True)
    mentor_notes = db.Column(db.Text, nullable=True)
    confirmed_time = db.Column(db.DateTime, nullable=True, index=True)  # set only while Confirmed

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    @property
    def status_enum(self) -> MeetingStatus | None:
        return MeetingStatus.parse(self.status)

    def to_dict(self, with_parties: bool = False) -> dict:
        data = {
            "_id": self.id,
            "mentee": self.mentee_id,
            "mentor": self.mentor_id,
            "requestedTime": _iso(self.requested_time),
            "durationMinutes": self.duration_minutes,
            "message": self.message,
            "status": self.status,
            "mentorNotes": self.mentor_notes,
            "confirmedTime": _iso(self.confirmed_time),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }
        if with_parties:
            data["mentee"] = self.mentee.display_dict() if self.mentee else None
            data["mentor"] = self.mentor.display_dict() if self.mentor else None
        return data

    def __repr__(self):
        return f"<MeetingRequest id={self.id} mentee={self.mentee_id} mentor={self.mentor_id} status={self.status}>"
