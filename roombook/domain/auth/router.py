"""Auth router - Session endpoints"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ...database import get_db
from ..users.repository import UserRepository
from .service import AuthService

router = APIRouter(prefix="/api/sessions", tags=["Auth"])


class PasswordLogin(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    token: str


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Dependency injection for AuthService"""
    return AuthService(UserRepository(db))


@router.post("/password", response_model=TokenResponse)
async def authenticate(data: PasswordLogin, service: AuthService = Depends(get_auth_service)):
    return TokenResponse(token=service.authenticate(data.email.strip().lower(), data.password))
