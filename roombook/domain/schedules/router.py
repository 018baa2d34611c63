"""Schedule router - FastAPI endpoints for availability and bookings"""

import logging
from datetime import date
from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ...database import get_db
from ...models import Schedule, ScheduleStatus, User
from ...shared.exceptions import Forbidden
from ...shared.validators import format_time_of_day, parse_iso_date, parse_time_of_day
from .schemas import (
    ScheduleCreate,
    SchedulePage,
    ScheduleResponse,
    ScheduleRoom,
    ScheduleStatusUpdate,
    ScheduleUser,
)
from .service import ScheduleService, build_schedule_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/schedules", tags=["Schedules"])


def get_schedule_service(db: Session = Depends(get_db)) -> ScheduleService:
    """Dependency injection for ScheduleService"""
    return build_schedule_service(db)


def to_schedule_response(schedule: Schedule) -> ScheduleResponse:
    user = schedule.user
    room = schedule.room
    return ScheduleResponse(
        id=schedule.id,
        userId=schedule.user_id,
        roomId=schedule.room_id,
        date=schedule.date.isoformat(),
        startTime=format_time_of_day(schedule.start_time),
        endTime=format_time_of_day(schedule.end_time),
        status=schedule.status,
        notes=schedule.notes,
        createdAt=schedule.created_at,
        user=ScheduleUser(id=user.id, name=user.name, lastName=user.last_name, email=user.email)
        if user
        else None,
        room=ScheduleRoom(id=room.id, name=room.name) if room else None,
    )


@router.get("/availability", response_model=list[str])
async def get_availability(
    room_id: UUID = Query(..., alias="roomId"),
    on_date: date = Query(..., alias="date"),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Free "HH:mm" slot starts for a room on a date"""
    slots = service.compute_availability(str(room_id), on_date)
    return [format_time_of_day(slot) for slot in slots]


@router.post("", response_model=ScheduleResponse, status_code=201)
async def create_schedule(
    data: ScheduleCreate,
    current_user: User = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Book a slot for the current user"""
    logger.info(f"📥 Creating schedule for user_id: {current_user.id}")
    schedule = service.create(
        user_id=current_user.id,
        room_id=data.roomId,
        on_date=parse_iso_date(data.date),
        start_time=parse_time_of_day(data.startTime),
        notes=data.notes,
    )
    return to_schedule_response(schedule)


@router.get("", response_model=SchedulePage)
async def get_schedules(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    query: Optional[str] = Query(None),
    room_id: Optional[UUID] = Query(None, alias="roomId"),
    on_date: Optional[date] = Query(None, alias="date"),
    order: Literal["ASC", "DESC"] = Query("DESC"),
    current_user: User = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
):
    """Bookings visible to the current user, newest slot first by default"""
    result = service.list_schedules(
        user_id=current_user.id,
        is_admin=current_user.is_admin,
        page=page,
        limit=limit,
        query=query,
        room_id=str(room_id) if room_id else None,
        on_date=on_date,
        order=order,
    )
    result["data"] = [to_schedule_response(s) for s in result["data"]]
    return result


@router.patch("/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule_status(
    schedule_id: UUID,
    data: ScheduleStatusUpdate,
    current_user: User = Depends(get_current_user),
    service: ScheduleService = Depends(get_schedule_service),
):
    """
    Change a booking's status.

    Users may cancel their own bookings; every other change is reserved to
    administrators.
    """
    if not current_user.is_admin:
        schedule = service.get_schedule(str(schedule_id))
        if schedule.user_id != current_user.id or data.status != ScheduleStatus.CANCELLED:
            logger.warning(
                f"⚠️ User {current_user.id} tried to set {data.status.value} on schedule {schedule_id}"
            )
            raise Forbidden()

    schedule = service.update_status(str(schedule_id), data.status, actor_id=current_user.id)
    return to_schedule_response(schedule)
