# mentorportal/services/meeting_store.py
import logging
from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import DependencyFailure
from ..models.meeting import MeetingRequest

log = logging.getLogger(__name__)


class MeetingRequestStore:
    """Single-record reads and writes of meeting requests.

    Each write commits on its own; concurrent writers to the same record
    resolve last-write-wins.
    """

    def __init__(self, db):
        self._db = db

    def get(self, meeting_id) -> MeetingRequest | None:
        try:
            return MeetingRequest.query.get(int(meeting_id))
        except (TypeError, ValueError):
            return None
        except SQLAlchemyError as e:
            log.exception("meeting lookup failed: %s", e)
            raise DependencyFailure() from e

    def add(self, meeting: MeetingRequest) -> MeetingRequest:
        self._db.session.add(meeting)
        return self.save(meeting)

    def save(self, meeting: MeetingRequest) -> MeetingRequest:
        try:
            self._db.session.commit()
        except SQLAlchemyError as e:
            self._db.session.rollback()
            log.exception("meeting write failed: %s", e)
            raise DependencyFailure() from e
        return meeting

    def filter(self, *criteria) -> list[MeetingRequest]:
        try:
            return (
                MeetingRequest.query
                .filter(*criteria)
                .order_by(MeetingRequest.created_at.desc(), MeetingRequest.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            log.exception("meeting query failed: %s", e)
            raise DependencyFailure() from e
