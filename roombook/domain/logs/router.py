"""Log router - FastAPI endpoints for the audit trail"""

from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ...database import get_db
from ...models import Log, User
from .schemas import LogPage, LogResponse, LogUser
from .service import LogService

router = APIRouter(prefix="/api/logs", tags=["Logs"])


def get_log_service(db: Session = Depends(get_db)) -> LogService:
    """Dependency injection for LogService"""
    return LogService(db)


def to_log_response(log: Log) -> LogResponse:
    user = log.user
    return LogResponse(
        id=log.id,
        userId=log.user_id,
        action=log.action,
        module=log.module,
        details=log.details,
        createdAt=log.created_at,
        user=LogUser(
            id=user.id,
            name=user.name,
            lastName=user.last_name,
            email=user.email,
            role=user.role,
        )
        if user
        else None,
    )


@router.get("", response_model=LogPage)
async def get_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    query: Optional[str] = Query(None),
    on_date: Optional[date] = Query(None, alias="date"),
    order: Literal["ASC", "DESC"] = Query("DESC"),
    current_user: User = Depends(get_current_user),
    service: LogService = Depends(get_log_service),
):
    """Audit entries; administrators see everyone's, users only their own"""
    result = service.list_logs(current_user.id, page, limit, query, on_date, order)
    result["data"] = [to_log_response(log) for log in result["data"]]
    return result
