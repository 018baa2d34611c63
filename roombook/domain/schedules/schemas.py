"""Schedule domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from ...models import ScheduleStatus
from ...shared.validators import parse_iso_date, parse_time_of_day, validate_uuid


class ScheduleCreate(BaseModel):
    """Schema for booking a slot"""

    roomId: str
    date: str
    startTime: str
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("roomId")
    @classmethod
    def validate_room_id(cls, v):
        if not validate_uuid(v):
            raise ValueError("Invalid room ID")
        # Stored ids are lowercase and hyphenated
        return str(UUID(v))

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        parse_iso_date(v)
        return v

    @field_validator("startTime")
    @classmethod
    def validate_start_time(cls, v):
        parse_time_of_day(v)
        return v


class ScheduleStatusUpdate(BaseModel):
    status: ScheduleStatus


class ScheduleUser(BaseModel):
    id: str
    name: str
    lastName: str
    email: str


class ScheduleRoom(BaseModel):
    id: str
    name: str


class ScheduleResponse(BaseModel):
    """Booking with enough owner/room detail for notifications"""

    id: str
    userId: str
    roomId: str
    date: str
    startTime: str
    endTime: str
    status: ScheduleStatus
    notes: Optional[str] = None
    createdAt: Optional[datetime] = None
    user: Optional[ScheduleUser] = None
    room: Optional[ScheduleRoom] = None


class SchedulePage(BaseModel):
    data: list[ScheduleResponse]
    total: int
    page: int
    totalPages: int
