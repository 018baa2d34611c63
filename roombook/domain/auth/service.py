"""Auth service - Password sessions"""

import logging

from ...security_utils import create_jwt_token, verify_password_bcrypt
from ...shared.exceptions import InvalidCredentials
from ..users.repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, users: UserRepository):
        self.users = users

    def authenticate(self, email: str, password: str) -> str:
        """
        Exchange email and password for a session token.

        Raises:
            InvalidCredentials: Same error for unknown email, inactive account
                and wrong password
        """
        user = self.users.get_by_email(email)
        if not user or not user.is_active or not verify_password_bcrypt(password, user.password_hash):
            logger.warning(f"⚠️ Failed login for {email}")
            raise InvalidCredentials()

        return create_jwt_token({"sub": user.id, "role": user.role})
