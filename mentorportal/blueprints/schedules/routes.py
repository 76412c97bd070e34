# mentorportal/blueprints/schedules/routes.py
from flask import current_app, jsonify, request
from flask_login import login_required, current_user

from ...models.user import Role
from ...security import roles_required
from ...services.schedule_query import ScheduleFilters
from ..forms import json_body
from . import schedules_bp


def _engine():
    return current_app.extensions["scheduling_engine"]


def _queries():
    return current_app.extensions["schedule_query"]


@schedules_bp.post("/request")
@login_required
@roles_required(Role.MENTEE)
def request_meeting():
    data = json_body()
    meeting = _engine().request_meeting(
        current_user.id,
        data.get("requestedTime"),
        data.get("durationMinutes"),
        data.get("message"),
    )
    return jsonify(meeting.to_dict()), 201


@schedules_bp.get("")
@login_required
@roles_required(Role.MENTEE, Role.MENTOR, Role.ADMIN)
def list_my_schedules():
    filters = ScheduleFilters.from_args(request.args)
    meetings = _queries().list_my_schedules(current_user.id, current_user.role_enum, filters)
    return jsonify([m.to_dict(with_parties=True) for m in meetings])


@schedules_bp.get("/<int:meeting_id>")
@login_required
@roles_required(Role.MENTEE, Role.MENTOR, Role.ADMIN)
def get_schedule(meeting_id):
    meeting = _queries().get_schedule(current_user.id, current_user.role_enum, meeting_id)
    return jsonify(meeting.to_dict(with_parties=True))


@schedules_bp.put("/<int:meeting_id>/status")
@login_required
@roles_required(Role.MENTOR, Role.ADMIN)
def update_status(meeting_id):
    data = json_body()
    meeting = _engine().update_status(
        current_user.id,
        current_user.role_enum,
        meeting_id,
        data.get("status", data.get("newStatus")),
        mentor_notes=data.get("mentorNotes"),
        confirmed_time=data.get("confirmedTime"),
    )
    return jsonify(meeting.to_dict())
