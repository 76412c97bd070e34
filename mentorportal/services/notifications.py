# mentorportal/services/notifications.py
"""Best-effort meeting emails.

Dispatch happens after the meeting write has committed. Templates are
rendered from plain snapshots so a background thread never touches the
request's database session.
"""
import logging
import threading

from flask import current_app

from ..extensions import _
from .email_service import send_email

log = logging.getLogger(__name__)


def _party(user) -> dict:
    return {
        "id": user.id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
    }


def _meeting(meeting) -> dict:
    return {
        "id": meeting.id,
        "status": meeting.status,
        "requested_time": meeting.requested_time,
        "duration_minutes": meeting.duration_minutes,
        "message": meeting.message,
        "mentor_notes": meeting.mentor_notes,
        "confirmed_time": meeting.confirmed_time,
    }


class NotificationGateway:
    def __init__(self, app=None, sender=send_email):
        self._send = sender
        self._app = app

    def init_app(self, app):
        self._app = app

    # --- public API ---

    def send_meeting_request_email(self, mentor, mentee, meeting):
        mentor_s, mentee_s, meeting_s = _party(mentor), _party(mentee), _meeting(meeting)
        return self._dispatch(self._meeting_request, mentor_s, mentee_s, meeting_s)

    def send_meeting_status_update_email(self, mentee, mentor, meeting):
        mentee_s, mentor_s, meeting_s = _party(mentee), _party(mentor), _meeting(meeting)
        return self._dispatch(self._status_update, mentee_s, mentor_s, meeting_s)

    # --- messages ---

    def _meeting_request(self, mentor, mentee, meeting) -> bool:
        return self._send(
            to=mentor["email"],
            subject=_("New Meeting Request from %(name)s",
                      name=f"{mentee['first_name']} {mentee['last_name']}"),
            template="meeting_request_mentor.html",
            mentor=mentor, mentee=mentee, meeting=meeting,
            portal_name=current_app.config.get("PORTAL_NAME", "SIP Portal"),
        )

    def _status_update(self, mentee, mentor, meeting) -> bool:
        return self._send(
            to=mentee["email"],
            subject=_("Meeting Request Update: Status Changed to %(status)s",
                      status=meeting["status"].upper()),
            template="meeting_status_update_mentee.html",
            mentee=mentee, mentor=mentor, meeting=meeting,
            portal_name=current_app.config.get("PORTAL_NAME", "SIP Portal"),
        )

    # --- dispatch ---

    def _dispatch(self, fn, *args):
        app = self._app or current_app._get_current_object()
        if app.config.get("NOTIFY_ASYNC"):
            t = threading.Thread(target=self._run, args=(app, fn, args), daemon=True)
            t.start()
            return t
        self._run(app, fn, args)
        return None

    def _run(self, app, fn, args):
        with app.app_context():
            try:
                ok = fn(*args)
            except Exception as e:
                log.exception("meeting notification %s failed: %s", fn.__name__, e)
                return
            if not ok:
                log.warning("meeting notification %s was not delivered (meeting=%s)", fn.__name__, args[-1]["id"])
