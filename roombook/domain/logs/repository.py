"""Log repository - Database operations for audit entries"""

from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlalchemy.orm import Query, Session, contains_eager

from ...models import Log, User


class LogRepository:
    """Repository for audit log database operations"""

    def __init__(self, db: Session):
        self.db = db

    def insert(self, user_id: str, action: str, module: str, details: Optional[dict] = None) -> Log:
        log = Log(user_id=user_id, action=action, module=module, details=details)
        self.db.add(log)
        self.db.commit()
        self.db.refresh(log)
        return log

    def search(
        self,
        user_id: Optional[str] = None,
        query: Optional[str] = None,
        on_date: Optional[date] = None,
        order: str = "DESC",
    ) -> Query:
        """Build a filtered log query; pagination is applied by the caller"""
        q = self.db.query(Log).join(Log.user).options(contains_eager(Log.user))

        if user_id:
            q = q.filter(Log.user_id == user_id)

        if query:
            search_term = f"%{query.lower()}%"
            q = q.filter((Log.action.ilike(search_term)) | (Log.module.ilike(search_term)))

        if on_date:
            day_start = datetime.combine(on_date, time.min)
            q = q.filter(Log.created_at >= day_start, Log.created_at < day_start + timedelta(days=1))

        ordering = Log.created_at.asc() if order == "ASC" else Log.created_at.desc()
        return q.order_by(ordering, Log.id)

    def delete_for_user(self, user_id: str) -> int:
        return self.db.query(Log).filter(Log.user_id == user_id).delete(synchronize_session=False)

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()
