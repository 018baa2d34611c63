"""Log domain schemas - Pydantic models for audit entries"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


class LogUser(BaseModel):
    id: str
    name: str
    lastName: str
    email: str
    role: str


class LogResponse(BaseModel):
    """Schema for an audit entry"""

    id: str
    userId: str
    action: str
    module: str
    details: Optional[dict[str, Any]] = None
    createdAt: Optional[datetime] = None
    user: Optional[LogUser] = None


class LogPage(BaseModel):
    data: list[LogResponse]
    total: int
    page: int
    totalPages: int
