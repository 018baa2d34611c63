"""Room service - Business logic for room configuration"""

import logging
from typing import Optional

from ...models import Room
from ...shared.exceptions import InvalidRoomWindow, RoomNotFound
from ...shared.validators import parse_time_of_day
from ..logs.service import SCHEDULING_MODULE, LogService
from .repository import RoomRepository
from .schemas import RoomCreate, RoomUpdate

logger = logging.getLogger(__name__)


class RoomService:
    """Service layer for room configuration"""

    def __init__(self, repo: RoomRepository, logs: LogService):
        self.repo = repo
        self.logs = logs

    def get_room(self, room_id: str, active_only: bool = True) -> Room:
        """Get a room; soft-deleted rooms count as missing unless asked for"""
        room = self.repo.get_active(room_id) if active_only else self.repo.get_by_id(room_id)
        if not room:
            raise RoomNotFound()
        return room

    def list_rooms(self) -> list[Room]:
        return self.repo.list_active()

    def create_rooms(self, data: list[RoomCreate], admin_id: str) -> list[Room]:
        """Batch-create rooms, one audit entry per room"""
        rooms = self.repo.insert_many(
            [
                {
                    "name": item.name,
                    "start_time": parse_time_of_day(item.startTime),
                    "end_time": parse_time_of_day(item.endTime),
                    "slot_duration": item.slotDuration,
                }
                for item in data
            ]
        )
        logger.info(f"🏢 Admin {admin_id} created {len(rooms)} room(s)")

        for room in rooms:
            self.logs.create_log(
                admin_id, "Room created", SCHEDULING_MODULE, {"roomId": room.id, "roomName": room.name}
            )
        return rooms

    def update_room(self, room_id: str, data: RoomUpdate, admin_id: str) -> Room:
        room = self.get_room(room_id, active_only=False)

        updates: dict[str, Optional[object]] = {
            "name": data.name,
            "start_time": parse_time_of_day(data.startTime) if data.startTime else None,
            "end_time": parse_time_of_day(data.endTime) if data.endTime else None,
            "slot_duration": data.slotDuration,
            "is_active": data.isActive,
        }

        start = updates["start_time"] if updates["start_time"] is not None else room.start_time
        end = updates["end_time"] if updates["end_time"] is not None else room.end_time
        if start >= end:
            raise InvalidRoomWindow()

        old_name = room.name
        room = self.repo.update(room, **updates)

        self.logs.create_log(
            admin_id,
            "Room updated",
            SCHEDULING_MODULE,
            {"roomId": room.id, "oldName": old_name, "newName": room.name},
        )
        return room

    def delete_room(self, room_id: str, admin_id: str) -> Room:
        """Soft delete; existing schedules keep pointing at the room"""
        room = self.get_room(room_id, active_only=False)
        room = self.repo.update(room, is_active=False)
        logger.info(f"🗑️ Room {room.id} deactivated by {admin_id}")

        self.logs.create_log(
            admin_id, "Room deactivated", SCHEDULING_MODULE, {"roomId": room.id, "roomName": room.name}
        )
        return room
