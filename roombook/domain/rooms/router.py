"""Room router - FastAPI endpoints for room configuration"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import Room, User
from ...shared.validators import format_time_of_day
from ..logs.service import LogService
from .repository import RoomRepository
from .schemas import RoomCreate, RoomResponse, RoomUpdate
from .service import RoomService

router = APIRouter(prefix="/api/rooms", tags=["Rooms"])


def get_room_service(db: Session = Depends(get_db)) -> RoomService:
    """Dependency injection for RoomService"""
    return RoomService(RoomRepository(db), LogService(db))


def to_room_response(room: Room) -> RoomResponse:
    return RoomResponse(
        id=room.id,
        name=room.name,
        startTime=format_time_of_day(room.start_time),
        endTime=format_time_of_day(room.end_time),
        slotDuration=room.slot_duration,
        isActive=room.is_active,
        createdAt=room.created_at,
    )


@router.get("", response_model=list[RoomResponse])
async def get_rooms(service: RoomService = Depends(get_room_service)):
    """List rooms open for booking, by name"""
    return [to_room_response(r) for r in service.list_rooms()]


@router.post("", response_model=list[RoomResponse], status_code=201)
async def create_rooms(
    data: list[RoomCreate],
    current_user: User = Depends(require_admin),
    service: RoomService = Depends(get_room_service),
):
    """Create one or more rooms"""
    rooms = service.create_rooms(data, current_user.id)
    return [to_room_response(r) for r in rooms]


@router.put("/{room_id}", response_model=RoomResponse)
async def update_room(
    room_id: UUID,
    data: RoomUpdate,
    current_user: User = Depends(require_admin),
    service: RoomService = Depends(get_room_service),
):
    """Update a room in place"""
    return to_room_response(service.update_room(str(room_id), data, current_user.id))


@router.delete("/{room_id}", status_code=204)
async def delete_room(
    room_id: UUID,
    current_user: User = Depends(require_admin),
    service: RoomService = Depends(get_room_service),
):
    """Deactivate a room"""
    service.delete_room(str(room_id), current_user.id)
    return Response(status_code=204)
