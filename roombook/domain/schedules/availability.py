"""
Availability calculator

Free slots for a room on a date are the room's slot grid minus the start
times of its non-cancelled bookings. Slots are atomic booking units and are
never merged.
"""

from datetime import date

from ..rooms.service import RoomService
from .repository import ScheduleLedger


def generate_slot_grid(start_time: int, end_time: int, slot_duration: int) -> list[int]:
    """
    Slot start minutes from `start_time`, stepping by `slot_duration`.

    Every emitted start is strictly before `end_time`, so a trailing partial
    slot is kept (it starts inside the window); an empty window yields [].
    """
    if slot_duration <= 0:
        raise ValueError("slot_duration must be positive")
    return list(range(start_time, end_time, slot_duration))


def is_grid_slot(start_time: int, end_time: int, slot_duration: int, candidate: int) -> bool:
    """Whether `candidate` is one of the grid's slot starts"""
    return (
        start_time <= candidate < end_time and (candidate - start_time) % slot_duration == 0
    )


def subtract_occupied(grid: list[int], occupied: set[int]) -> list[int]:
    return [slot for slot in grid if slot not in occupied]


class AvailabilityCalculator:
    """Derives free slots from room configuration and the booking ledger"""

    def __init__(self, rooms: RoomService, ledger: ScheduleLedger):
        self.rooms = rooms
        self.ledger = ledger

    def compute_availability(self, room_id: str, on_date: date) -> list[int]:
        """
        Ordered free slot starts for a room on a date.

        Raises:
            RoomNotFound: If the room is missing or inactive
        """
        room = self.rooms.get_room(room_id)
        occupied = self.ledger.occupied_start_times(room.id, on_date)
        grid = generate_slot_grid(room.start_time, room.end_time, room.slot_duration)
        return subtract_occupied(grid, occupied)
