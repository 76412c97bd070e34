# mentorportal/services/schedule_query.py
from dataclasses import dataclass

from sqlalchemy import and_, or_

from ..exceptions import Forbidden, NotFound
from ..models.meeting import MeetingRequest, MeetingStatus, TERMINAL_STATUSES
from ..models.user import Role
from ..security import Capability, can
from .scheduling import utcnow

TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class ScheduleFilters:
    status: str | None = None
    upcoming: bool = False
    past: bool = False

    @classmethod
    def from_args(cls, args) -> "ScheduleFilters":
        status = (args.get("status") or "").strip() or None
        return cls(
            status=status,
            upcoming=(args.get("upcoming") or "").strip().lower() in TRUTHY,
            past=(args.get("past") or "").strip().lower() in TRUTHY,
        )


class ScheduleQueryService:
    def __init__(self, *, store, clock=utcnow):
        self.store = store
        self.clock = clock

    def _owner_criteria(self, caller_id, caller_role):
        if can(caller_role, Capability.VIEW_ALL_SCHEDULES):
            return []
        if not can(caller_role, Capability.VIEW_OWN_SCHEDULE):
            raise Forbidden("User role is not authorized to view schedules")
        if Role.parse(caller_role) is Role.MENTEE:
            return [MeetingRequest.mentee_id == caller_id]
        return [MeetingRequest.mentor_id == caller_id]

    def _time_criteria(self, filters: ScheduleFilters):
        now = self.clock()
        confirmed = MeetingRequest.status == MeetingStatus.CONFIRMED.value
        upcoming = or_(
            MeetingRequest.status == MeetingStatus.PENDING.value,
            and_(confirmed, MeetingRequest.confirmed_time >= now),
        )
        past = or_(
            MeetingRequest.status.in_([s.value for s in TERMINAL_STATUSES]),
            and_(confirmed, MeetingRequest.confirmed_time < now),
        )
        # Both flags set: union of the two windows
        if filters.upcoming and filters.past:
            return [or_(upcoming, past)]
        if filters.upcoming:
            return [upcoming]
        if filters.past:
            return [past]
        return []

    def list_my_schedules(self, caller_id, caller_role, filters: ScheduleFilters | None = None) -> list[MeetingRequest]:
        filters = filters or ScheduleFilters()
        criteria = self._owner_criteria(caller_id, caller_role)
        if filters.status:
            criteria.append(MeetingRequest.status == filters.status)
        criteria.extend(self._time_criteria(filters))
        return self.store.filter(*criteria)

    def get_schedule(self, caller_id, caller_role, meeting_id) -> MeetingRequest:
        meeting = self.store.get(meeting_id)
        if meeting is None:
            raise NotFound("Schedule request not found")
        if can(caller_role, Capability.VIEW_ALL_SCHEDULES):
            return meeting
        if caller_id in (meeting.mentee_id, meeting.mentor_id):
            return meeting
        raise Forbidden("User not authorized to view this schedule request")
