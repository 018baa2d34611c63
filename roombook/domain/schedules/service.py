"""Schedule service - Booking lifecycle"""

import logging
from datetime import date
from typing import Optional

from ...models import Schedule, ScheduleStatus
from ...shared.exceptions import InvalidSlot, ScheduleNotFound, SlotUnavailable
from ...shared.pagination import page_envelope, paginate
from ...shared.validators import format_time_of_day
from ..logs.service import SCHEDULING_MODULE, LogService
from ..rooms.repository import RoomRepository
from ..rooms.service import RoomService
from .availability import AvailabilityCalculator, is_grid_slot
from .repository import ActiveSlotTaken, ScheduleLedger, ScheduleRepository

logger = logging.getLogger(__name__)

# Status changes that leave an audit trail, with their labels
AUDITED_STATUS_ACTIONS = {
    ScheduleStatus.CANCELLED: "Schedule cancelled",
    ScheduleStatus.COMPLETED: "Schedule completed",
}


class ScheduleService:
    """
    Service layer for bookings.

    Booking goes through two guards: a read of the ledger that rejects obvious
    conflicts early, and the ledger's unique active-slot constraint at insert.
    Only the second one is authoritative; concurrent requests for the same
    slot can both pass the first.
    """

    def __init__(self, ledger: ScheduleLedger, rooms: RoomService, logs: LogService):
        self.ledger = ledger
        self.rooms = rooms
        self.logs = logs
        self.availability = AvailabilityCalculator(rooms, ledger)

    def compute_availability(self, room_id: str, on_date: date) -> list[int]:
        return self.availability.compute_availability(room_id, on_date)

    def create(
        self,
        user_id: str,
        room_id: str,
        on_date: date,
        start_time: int,
        notes: Optional[str] = None,
    ) -> Schedule:
        """
        Book a slot.

        Raises:
            RoomNotFound: If the room is missing or inactive
            InvalidSlot: If `start_time` is not on the room's slot grid
            SlotUnavailable: If the slot already has an active booking
        """
        room = self.rooms.get_room(room_id)

        if not is_grid_slot(room.start_time, room.end_time, room.slot_duration, start_time):
            raise InvalidSlot()

        if self.ledger.find_conflicting(room.id, on_date, start_time):
            logger.warning(
                f"⚠️ Slot {format_time_of_day(start_time)} on {on_date} already taken in room {room.id}"
            )
            raise SlotUnavailable()

        try:
            schedule = self.ledger.insert(
                user_id=user_id,
                room_id=room.id,
                date=on_date,
                start_time=start_time,
                end_time=start_time + room.slot_duration,
                status=ScheduleStatus.PENDING.value,
                notes=notes,
            )
        except ActiveSlotTaken as e:
            logger.warning(
                f"⚠️ Lost booking race for {format_time_of_day(start_time)} on {on_date} in room {room.id}"
            )
            raise SlotUnavailable() from e

        logger.info(f"📅 Schedule {schedule.id} created by user {user_id}")
        self.logs.create_log(
            user_id,
            "Schedule created",
            SCHEDULING_MODULE,
            {
                "scheduleId": schedule.id,
                "date": on_date.isoformat(),
                "startTime": format_time_of_day(start_time),
            },
        )
        return schedule

    def get_schedule(self, schedule_id: str) -> Schedule:
        schedule = self.ledger.find_by_id(schedule_id)
        if not schedule:
            raise ScheduleNotFound()
        return schedule

    def update_status(
        self, schedule_id: str, status: ScheduleStatus, actor_id: Optional[str] = None
    ) -> Schedule:
        """
        Set a booking's status. Any status may follow any other here; who may
        request which change is decided by the caller.

        Raises:
            ScheduleNotFound: If the booking does not exist
            SlotUnavailable: If reactivating a booking whose slot was re-booked
        """
        schedule = self.get_schedule(schedule_id)

        try:
            schedule = self.ledger.update_status(schedule, status)
        except ActiveSlotTaken as e:
            raise SlotUnavailable() from e

        action = AUDITED_STATUS_ACTIONS.get(status)
        if action:
            self.logs.create_log(
                actor_id or schedule.user_id,
                action,
                SCHEDULING_MODULE,
                {"scheduleId": schedule.id, "status": status.value},
            )
        return schedule

    def list_schedules(
        self,
        user_id: Optional[str],
        is_admin: bool,
        page: int = 1,
        limit: int = 10,
        query: Optional[str] = None,
        room_id: Optional[str] = None,
        on_date: Optional[date] = None,
        order: str = "DESC",
    ) -> dict:
        """Paginated bookings; non-admins are restricted to their own"""
        owner_filter = None if is_admin else user_id
        if not is_admin and not owner_filter:
            return page_envelope([], 0, page, limit)

        q = self.ledger.search(
            user_id=owner_filter, room_id=room_id, on_date=on_date, query=query, order=order
        )
        rows, total = paginate(q, page, limit)
        return page_envelope(rows, total, page, limit)


def build_schedule_service(db) -> ScheduleService:
    """Assemble a ScheduleService over one database session"""
    logs = LogService(db)
    return ScheduleService(ScheduleRepository(db), RoomService(RoomRepository(db), logs), logs)
