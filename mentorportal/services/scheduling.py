# mentorportal/services/scheduling.py
"""Meeting request creation and status transitions."""
import logging
from datetime import datetime, timezone

from ..exceptions import (
    Forbidden, InvalidField, InvalidStatus, InvalidTime, MissingConfirmedTime,
    MissingField, NotFound, UnresolvedMentor,
)
from ..models.meeting import MeetingRequest, MeetingStatus, MESSAGE_MAX_LENGTH
from ..models.user import Role
from ..security import Capability, can

log = logging.getLogger(__name__)


# Target statuses reachable from each current status. Statuses without an
# entry are terminal.
ALLOWED_TRANSITIONS: dict[MeetingStatus, frozenset[MeetingStatus]] = {
    MeetingStatus.PENDING: frozenset({
        MeetingStatus.CONFIRMED,
        MeetingStatus.REJECTED,
        MeetingStatus.COMPLETED,
        MeetingStatus.CANCELLED,
    }),
    MeetingStatus.CONFIRMED: frozenset({
        MeetingStatus.CONFIRMED,
        MeetingStatus.COMPLETED,
        MeetingStatus.CANCELLED,
    }),
}


def utcnow() -> datetime:
    return datetime.utcnow()


def parse_datetime(value, field: str) -> datetime:
    """Parse an ISO-8601 value into naive UTC."""
    if isinstance(value, datetime):
        dt = value
    else:
        raw = str(value).strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(raw)
        except ValueError:
            raise InvalidField(f"{field} must be an ISO-8601 date & time.")
    if dt.tzinfo is not None:
        try:
            dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError:
            raise InvalidField(f"{field} is outside the supported date range.")
    return dt


def _parse_duration(value) -> int:
    if isinstance(value, bool):
        raise InvalidField("durationMinutes must be a positive whole number.")
    if isinstance(value, float):
        # 30.0 from a JSON client is still thirty minutes
        if not value.is_integer():
            raise InvalidField("durationMinutes must be a positive whole number.")
        value = int(value)
    try:
        minutes = int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidField("durationMinutes must be a positive whole number.")
    if minutes <= 0:
        raise InvalidField("durationMinutes must be a positive whole number.")
    return minutes


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class SchedulingEngine:
    def __init__(self, *, directory, store, notifier, clock=utcnow):
        self.directory = directory
        self.store = store
        self.notifier = notifier
        self.clock = clock

    # -----------------
    # Create
    # -----------------

    def request_meeting(self, caller_id, requested_time, duration_minutes, message=None) -> MeetingRequest:
        mentee = self.directory.find_by_id(caller_id)
        if mentee is None or not can(mentee.role, Capability.REQUEST_MEETING):
            raise Forbidden("Only mentees can request meetings.")

        mentor = self._resolve_mentor(mentee)

        if _blank(requested_time) or _blank(duration_minutes):
            raise MissingField("Please provide requested time and duration")

        when = parse_datetime(requested_time, "requestedTime")
        minutes = _parse_duration(duration_minutes)
        if message is not None and not isinstance(message, str):
            raise InvalidField("message must be text.")
        note = (message or "").strip() or None
        if note and len(note) > MESSAGE_MAX_LENGTH:
            raise InvalidField(f"Message cannot exceed {MESSAGE_MAX_LENGTH} characters")

        if when < self.clock():
            raise InvalidTime("Cannot request a meeting in the past.")

        meeting = MeetingRequest(
            mentee_id=mentee.id,
            mentor_id=mentor.id,
            requested_time=when,
            duration_minutes=minutes,
            message=note,
            status=MeetingStatus.PENDING.value,
            confirmed_time=None,
        )
        self.store.add(meeting)
        log.info("Meeting %s requested by mentee=%s with mentor=%s for %s",
                 meeting.id, mentee.id, mentor.id, when.isoformat())

        try:
            self.notifier.send_meeting_request_email(mentor, mentee, meeting)
        except Exception as e:
            log.exception("Failed to send meeting request email (meeting=%s): %s", meeting.id, e)
        return meeting

    def _resolve_mentor(self, mentee):
        mentor = self.directory.find_by_id(mentee.assigned_mentor_id) if mentee.assigned_mentor_id else None
        if mentor is None or mentor.role_enum is not Role.MENTOR or mentor.id == mentee.id:
            raise UnresolvedMentor("Assigned mentor not found for this user.")
        return mentor

    # -----------------
    # Transition
    # -----------------

    def may_manage(self, caller_id, caller_role, meeting: MeetingRequest) -> bool:
        if can(caller_role, Capability.MANAGE_ANY_MEETING):
            return True
        return can(caller_role, Capability.MANAGE_OWN_MEETINGS) and meeting.mentor_id == caller_id

    def update_status(self, caller_id, caller_role, meeting_id, new_status,
                      mentor_notes=None, confirmed_time=None) -> MeetingRequest:
        meeting = self.store.get(meeting_id)
        if meeting is None:
            raise NotFound("Schedule request not found")

        if not self.may_manage(caller_id, caller_role, meeting):
            raise Forbidden("User not authorized to update this schedule request")

        target = MeetingStatus.parse(new_status) if new_status is not None else None
        if target is None or target is MeetingStatus.PENDING:
            raise InvalidStatus(f"Invalid target status: {new_status}")
        current = meeting.status_enum
        if target not in ALLOWED_TRANSITIONS.get(current, frozenset()):
            raise InvalidStatus(f"Cannot change status from {meeting.status} to {target.value}")

        confirmed_at = None
        if target is MeetingStatus.CONFIRMED:
            if _blank(confirmed_time):
                raise MissingConfirmedTime("Confirmed time is required when confirming a meeting")
            confirmed_at = parse_datetime(confirmed_time, "confirmedTime")

        previous = meeting.status
        meeting.status = target.value
        if not _blank(mentor_notes):
            meeting.mentor_notes = str(mentor_notes).strip()
        # confirmed_time exists only while Confirmed
        meeting.confirmed_time = confirmed_at
        self.store.save(meeting)
        log.info("Meeting %s status %s -> %s by user=%s", meeting.id, previous, meeting.status, caller_id)

        try:
            mentee = self.directory.find_by_id(meeting.mentee_id)
            mentor = self.directory.find_by_id(meeting.mentor_id)
            if mentee and mentor:
                self.notifier.send_meeting_status_update_email(mentee, mentor, meeting)
        except Exception as e:
            log.exception("Failed to send meeting status update email (meeting=%s): %s", meeting.id, e)
        return meeting
