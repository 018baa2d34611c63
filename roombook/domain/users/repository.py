"""User repository - Database operations for users"""

from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlalchemy.orm import Query, Session

from ...models import User, UserRole


class UserRepository:
    """Repository for user database operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.lower()).first()

    def insert(self, **user_data) -> User:
        user = User(**user_data)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def update(self, user: User, **updates) -> User:
        """Update a user with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(user, key):
                setattr(user, key, value)

        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user: User) -> None:
        self.db.delete(user)
        self.db.commit()

    def search(
        self,
        query: Optional[str] = None,
        on_date: Optional[date] = None,
        order: str = "DESC",
    ) -> Query:
        """Regular (non-admin) users, filtered; pagination is applied by the caller"""
        q = self.db.query(User).filter(User.role == UserRole.USER.value)

        if query:
            search_term = f"%{query.lower()}%"
            q = q.filter(
                (User.name.ilike(search_term))
                | (User.last_name.ilike(search_term))
                | (User.email.ilike(search_term))
            )

        if on_date:
            day_start = datetime.combine(on_date, time.min)
            q = q.filter(User.created_at >= day_start, User.created_at < day_start + timedelta(days=1))

        ordering = User.created_at.asc() if order == "ASC" else User.created_at.desc()
        return q.order_by(ordering, User.id)
