"""User router - FastAPI endpoints for accounts"""

from datetime import date
from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin, security
from ...config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ...database import get_db
from ...models import User
from ...security_utils import verify_jwt_token
from ...shared.exceptions import Forbidden
from .schemas import UserCreate, UserPage, UserResponse, UserUpdate
from .service import UserService

router = APIRouter(prefix="/api", tags=["Users"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        lastName=user.last_name,
        email=user.email,
        role=user.role,
        isActive=user.is_active,
        createdAt=user.created_at,
    )


def _ensure_self_or_admin(current_user: User, user_id: str) -> None:
    if current_user.id != user_id and not current_user.is_admin:
        raise Forbidden()


@router.post("/users", response_model=UserResponse, status_code=201)
async def register_user(
    data: UserCreate,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    service: UserService = Depends(get_user_service),
):
    """
    Register an account. Open to anyone; an authenticated administrator may
    also create administrators.
    """
    allow_admin = False
    if credentials:
        payload = verify_jwt_token(credentials.credentials)
        if payload and payload.get("sub"):
            requester = service.repo.get_by_id(payload["sub"])
            allow_admin = bool(requester and requester.is_active and requester.is_admin)

    return to_user_response(service.register(data, allow_admin=allow_admin))


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return to_user_response(current_user)


@router.get("/users", response_model=UserPage)
async def get_users(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    query: Optional[str] = Query(None),
    on_date: Optional[date] = Query(None, alias="date"),
    order: Literal["ASC", "DESC"] = Query("DESC"),
    _admin: User = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    """Regular users, paginated (administrators only)"""
    result = service.list_users(page, limit, query, on_date, order)
    result["data"] = [to_user_response(u) for u in result["data"]]
    return result


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    _ensure_self_or_admin(current_user, str(user_id))
    return to_user_response(service.get_user(str(user_id)))


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    _ensure_self_or_admin(current_user, str(user_id))
    user = service.update_user(str(user_id), data, allow_privileged=current_user.is_admin)
    return to_user_response(user)


@router.delete("/users/{user_id}", status_code=204)
async def delete_user(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    _ensure_self_or_admin(current_user, str(user_id))
    service.delete_user(str(user_id))
    return Response(status_code=204)
