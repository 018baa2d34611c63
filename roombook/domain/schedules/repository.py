"""Schedule repository - The booking ledger"""

import logging
from datetime import date
from typing import Optional, Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session, contains_eager, joinedload

from ...models import Schedule, ScheduleStatus, User

logger = logging.getLogger(__name__)

ACTIVE_SLOT_INDEX = "uq_schedules_active_slot"
# SQLite reports the indexed columns instead of the index name
SQLITE_ACTIVE_SLOT_MESSAGE = "UNIQUE constraint failed: schedules.room_id, schedules.date, schedules.start_time"


class ActiveSlotTaken(Exception):
    """Storage rejected a write because the room/date/slot already has an active booking"""


def is_active_slot_violation(integrity_error: IntegrityError) -> bool:
    """Whether an IntegrityError came from the one-active-booking-per-slot index"""
    orig = getattr(integrity_error, "orig", None)
    diag = getattr(orig, "diag", None)

    constraint_name = ""
    if diag is not None:
        constraint_name = getattr(diag, "constraint_name", "") or ""

    if constraint_name:
        return constraint_name == ACTIVE_SLOT_INDEX

    text = str(orig) if orig is not None else ""
    return ACTIVE_SLOT_INDEX in text or SQLITE_ACTIVE_SLOT_MESSAGE in text


class ScheduleLedger(Protocol):
    """Persistence port the lifecycle manager depends on"""

    def find_by_id(self, schedule_id: str) -> Optional[Schedule]: ...

    def find_conflicting(
        self,
        room_id: str,
        on_date: date,
        start_time: int,
        exclude_status: ScheduleStatus = ScheduleStatus.CANCELLED,
    ) -> Optional[Schedule]: ...

    def occupied_start_times(self, room_id: str, on_date: date) -> set[int]: ...

    def insert(self, **schedule_data) -> Schedule: ...

    def update_status(self, schedule: Schedule, status: ScheduleStatus) -> Schedule: ...

    def search(
        self,
        user_id: Optional[str] = None,
        room_id: Optional[str] = None,
        on_date: Optional[date] = None,
        query: Optional[str] = None,
        order: str = "DESC",
    ) -> Query: ...


class ScheduleRepository:
    """SQLAlchemy implementation of the booking ledger"""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, schedule_id: str) -> Optional[Schedule]:
        return (
            self.db.query(Schedule)
            .options(joinedload(Schedule.user), joinedload(Schedule.room))
            .filter(Schedule.id == schedule_id)
            .first()
        )

    def find_conflicting(
        self,
        room_id: str,
        on_date: date,
        start_time: int,
        exclude_status: ScheduleStatus = ScheduleStatus.CANCELLED,
    ) -> Optional[Schedule]:
        """Existing booking at the same room/date/slot whose status is not `exclude_status`"""
        return (
            self.db.query(Schedule)
            .filter(
                Schedule.room_id == room_id,
                Schedule.date == on_date,
                Schedule.start_time == start_time,
                Schedule.status != exclude_status.value,
            )
            .first()
        )

    def occupied_start_times(self, room_id: str, on_date: date) -> set[int]:
        """Start minutes of every non-cancelled booking for a room on a date"""
        rows = (
            self.db.query(Schedule.start_time)
            .filter(
                Schedule.room_id == room_id,
                Schedule.date == on_date,
                Schedule.status != ScheduleStatus.CANCELLED.value,
            )
            .all()
        )
        return {row.start_time for row in rows}

    def insert(self, **schedule_data) -> Schedule:
        """
        Insert a booking.

        Raises:
            ActiveSlotTaken: If the unique active-slot index rejects the row
        """
        schedule = Schedule(**schedule_data)
        self.db.add(schedule)
        self._commit_or_raise_taken()
        self.db.refresh(schedule)
        return schedule

    def update_status(self, schedule: Schedule, status: ScheduleStatus) -> Schedule:
        """
        Persist a new status.

        Raises:
            ActiveSlotTaken: If reactivating a booking whose slot was re-booked
        """
        schedule.status = status.value
        self._commit_or_raise_taken()
        self.db.refresh(schedule)
        return schedule

    def _commit_or_raise_taken(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if not is_active_slot_violation(e):
                logger.error(f"❌ Schedule write failed: {e.orig}")
                raise
            logger.warning(f"⚠️ Active slot constraint rejected write: {e.orig}")
            raise ActiveSlotTaken() from e

    def search(
        self,
        user_id: Optional[str] = None,
        room_id: Optional[str] = None,
        on_date: Optional[date] = None,
        query: Optional[str] = None,
        order: str = "DESC",
    ) -> Query:
        """Build a filtered schedule query ordered by (date, start_time)"""
        q = (
            self.db.query(Schedule)
            .join(Schedule.user)
            .options(contains_eager(Schedule.user), joinedload(Schedule.room))
        )

        if user_id:
            q = q.filter(Schedule.user_id == user_id)

        if room_id:
            q = q.filter(Schedule.room_id == room_id)

        if on_date:
            q = q.filter(Schedule.date == on_date)

        if query:
            search_term = f"%{query.lower()}%"
            q = q.filter(
                (User.name.ilike(search_term))
                | (User.last_name.ilike(search_term))
                | (User.email.ilike(search_term))
            )

        if order == "ASC":
            return q.order_by(Schedule.date.asc(), Schedule.start_time.asc(), Schedule.id)
        return q.order_by(Schedule.date.desc(), Schedule.start_time.desc(), Schedule.id)

    def delete_for_user(self, user_id: str) -> int:
        return (
            self.db.query(Schedule)
            .filter(Schedule.user_id == user_id)
            .delete(synchronize_session=False)
        )
