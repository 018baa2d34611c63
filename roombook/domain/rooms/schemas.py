"""Room domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import parse_time_of_day


def _check_time(v):
    if v is not None:
        parse_time_of_day(v)
    return v


class RoomCreate(BaseModel):
    """Schema for creating a room; the endpoint accepts a list of these"""

    name: str = Field(min_length=1)
    startTime: str
    endTime: str
    slotDuration: int = Field(30, ge=15)

    @field_validator("startTime", "endTime")
    @classmethod
    def validate_time(cls, v):
        return _check_time(v)

    @model_validator(mode="after")
    def validate_window(self):
        if parse_time_of_day(self.startTime) >= parse_time_of_day(self.endTime):
            raise ValueError("startTime must be before endTime")
        return self


class RoomUpdate(BaseModel):
    """Schema for updating an existing room"""

    name: Optional[str] = Field(None, min_length=1)
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    slotDuration: Optional[int] = Field(None, ge=15)
    isActive: Optional[bool] = None

    @field_validator("startTime", "endTime")
    @classmethod
    def validate_time(cls, v):
        return _check_time(v)


class RoomResponse(BaseModel):
    """Schema for room response"""

    id: str
    name: str
    startTime: str
    endTime: str
    slotDuration: int
    isActive: bool
    createdAt: Optional[datetime] = None
