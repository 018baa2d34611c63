"""User service - Business logic for accounts"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import User, UserRole
from ...security_utils import hash_password_bcrypt
from ...shared.exceptions import EmailAlreadyRegistered, UserNotFound
from ...shared.pagination import page_envelope, paginate
from ..logs.repository import LogRepository
from ..logs.service import ACCOUNT_MODULE, LogService
from ..schedules.repository import ScheduleRepository
from .repository import UserRepository
from .schemas import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user accounts"""

    def __init__(self, db: Session, repo: Optional[UserRepository] = None, logs: Optional[LogService] = None):
        self.db = db
        self.repo = repo or UserRepository(db)
        self.logs = logs or LogService(db)

    def get_user(self, user_id: str) -> User:
        user = self.repo.get_by_id(user_id)
        if not user:
            raise UserNotFound()
        return user

    def list_users(
        self,
        page: int = 1,
        limit: int = 10,
        query: Optional[str] = None,
        on_date: Optional[date] = None,
        order: str = "DESC",
    ) -> dict:
        rows, total = paginate(self.repo.search(query, on_date, order), page, limit)
        return page_envelope(rows, total, page, limit)

    def register(self, data: UserCreate, allow_admin: bool = False) -> User:
        """
        Create an account.

        Only an administrator may create another administrator; for anyone
        else the requested role is downgraded to USER.
        """
        if self.repo.get_by_email(data.email):
            raise EmailAlreadyRegistered()

        role = data.role if allow_admin else UserRole.USER
        try:
            user = self.repo.insert(
                name=data.name,
                last_name=data.lastName,
                email=data.email,
                password_hash=hash_password_bcrypt(data.password),
                role=role.value,
            )
        except IntegrityError as e:
            # Email taken between check and insert
            self.db.rollback()
            raise EmailAlreadyRegistered() from e

        logger.info(f"🆕 User registered: {user.email}")
        self.logs.create_log(
            user.id, "User registered", ACCOUNT_MODULE, {"email": user.email, "role": user.role}
        )
        return user

    def update_user(self, user_id: str, data: UserUpdate, allow_privileged: bool = False) -> User:
        """Update profile fields; role and active flag need `allow_privileged`"""
        user = self.get_user(user_id)

        email_changed = data.email is not None and data.email != user.email
        if email_changed and self.repo.get_by_email(data.email):
            raise EmailAlreadyRegistered()

        updates = {
            "name": data.name,
            "last_name": data.lastName,
            "email": data.email,
            "password_hash": hash_password_bcrypt(data.password) if data.password else None,
        }
        if allow_privileged:
            updates["role"] = data.role.value if data.role else None
            updates["is_active"] = data.isActive

        user = self.repo.update(user, **updates)

        action = "E-mail updated" if email_changed else "Profile updated"
        self.logs.create_log(user.id, action, ACCOUNT_MODULE)
        return user

    def delete_user(self, user_id: str) -> None:
        """Remove a user together with their audit entries and bookings"""
        user = self.get_user(user_id)
        LogRepository(self.db).delete_for_user(user.id)
        ScheduleRepository(self.db).delete_for_user(user.id)
        self.repo.delete(user)
        logger.info(f"🗑️ User {user_id} deleted")

    def ensure_default_admin(self, email: str, password: str) -> User:
        """Create the bootstrap administrator unless the email is already taken"""
        existing = self.repo.get_by_email(email)
        if existing:
            return existing

        return self.register(
            UserCreate(
                name="Admin",
                lastName="User",
                email=email,
                password=password,
                role=UserRole.ADMIN,
            ),
            allow_admin=True,
        )
