"""Log service - Audit trail for state-changing actions"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Log
from ...shared.exceptions import UserNotFound
from ...shared.pagination import page_envelope, paginate
from .repository import LogRepository

logger = logging.getLogger(__name__)

SCHEDULING_MODULE = "Scheduling"
ACCOUNT_MODULE = "My Account"


class LogService:
    """Service layer for the audit log sink and its read side"""

    def __init__(self, db: Session, repo: Optional[LogRepository] = None):
        self.db = db
        self.repo = repo or LogRepository(db)

    def create_log(
        self, user_id: str, action: str, module: str, details: Optional[dict] = None
    ) -> Optional[Log]:
        """
        Record an audit entry in its own transaction.

        Fire-and-forget: the triggering operation has already committed, so a
        failure here is logged and swallowed instead of being raised.
        """
        try:
            return self.repo.insert(user_id, action, module, details)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to write audit log '{action}' for user {user_id}: {e}")
            return None

    def list_logs(
        self,
        requesting_user_id: str,
        page: int = 1,
        limit: int = 10,
        query: Optional[str] = None,
        on_date: Optional[date] = None,
        order: str = "DESC",
    ) -> dict:
        """Paginated audit entries; non-admins only see their own"""
        requester = self.repo.get_user(requesting_user_id)
        if not requester:
            raise UserNotFound()

        owner_filter = None if requester.is_admin else requester.id
        q = self.repo.search(user_id=owner_filter, query=query, on_date=on_date, order=order)
        rows, total = paginate(q, page, limit)
        return page_envelope(rows, total, page, limit)
