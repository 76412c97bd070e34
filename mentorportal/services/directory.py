# mentorportal/services/directory.py
import logging
from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import DependencyFailure
from ..models.user import User

log = logging.getLogger(__name__)


class UserDirectory:
    """Read-only lookups over user records."""

    def find_by_id(self, user_id) -> User | None:
        if user_id is None:
            return None
        try:
            return User.query.get(int(user_id))
        except (TypeError, ValueError):
            return None
        except SQLAlchemyError as e:
            log.exception("user lookup failed: %s", e)
            raise DependencyFailure() from e

    def find_by_email(self, email: str) -> User | None:
        if not email:
            return None
        try:
            return User.query.filter(User.email == email.strip().lower()).first()
        except SQLAlchemyError as e:
            log.exception("user lookup failed: %s", e)
            raise DependencyFailure() from e
