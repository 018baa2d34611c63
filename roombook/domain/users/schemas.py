"""User domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import UserRole
from ...shared.validators import validate_email


class UserCreate(BaseModel):
    """Schema for registering a user"""

    name: str = Field(min_length=1)
    lastName: str = Field(min_length=1)
    email: str = Field(min_length=1)
    password: str = Field(min_length=6, max_length=72)
    role: UserRole = UserRole.USER

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class UserUpdate(BaseModel):
    """Schema for updating an existing user"""

    name: Optional[str] = Field(None, min_length=1)
    lastName: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=1)
    password: Optional[str] = Field(None, min_length=6, max_length=72)
    role: Optional[UserRole] = None
    isActive: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class UserResponse(BaseModel):
    """Schema for user response; never carries the password hash"""

    id: str
    name: str
    lastName: str
    email: str
    role: UserRole
    isActive: bool
    createdAt: Optional[datetime] = None


class UserPage(BaseModel):
    data: list[UserResponse]
    total: int
    page: int
    totalPages: int
