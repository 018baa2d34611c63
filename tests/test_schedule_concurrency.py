"""Concurrent booking attempts for the same slot"""

import threading
from datetime import date

import pytest

from roombook.domain.schedules.repository import ScheduleRepository
from roombook.domain.schedules.service import build_schedule_service
from roombook.models import Schedule, ScheduleStatus
from roombook.shared.exceptions import SlotUnavailable

BOOKING_DATE = date(2026, 1, 8)
ATTEMPTS = 8


def race_for_slot(session_factory, user_ids, room_id, start_time):
    """Fire one booking per user at the same moment; return (successes, refusals)"""
    barrier = threading.Barrier(len(user_ids))
    successes, refusals, failures = [], [], []
    lock = threading.Lock()

    def attempt(user_id):
        session = session_factory()
        try:
            service = build_schedule_service(session)
            barrier.wait()
            schedule = service.create(user_id, room_id, BOOKING_DATE, start_time)
            with lock:
                successes.append(schedule.id)
        except SlotUnavailable:
            with lock:
                refusals.append(user_id)
        except Exception as e:  # surfaced below so the test fails loudly
            with lock:
                failures.append(e)
        finally:
            session.close()

    threads = [threading.Thread(target=attempt, args=(uid,)) for uid in user_ids]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)

    assert not failures, failures
    return successes, refusals


def active_bookings(db, room_id):
    db.expire_all()
    return (
        db.query(Schedule)
        .filter(
            Schedule.room_id == room_id,
            Schedule.date == BOOKING_DATE,
            Schedule.start_time == 480,
            Schedule.status != ScheduleStatus.CANCELLED.value,
        )
        .count()
    )


def test_exactly_one_concurrent_booking_wins(db, session_factory, make_room, make_user):
    room_id = make_room().id
    user_ids = [make_user().id for _ in range(ATTEMPTS)]

    successes, refusals = race_for_slot(session_factory, user_ids, room_id, 480)

    assert len(successes) == 1
    assert len(refusals) == ATTEMPTS - 1
    assert active_bookings(db, room_id) == 1


def test_constraint_decides_when_every_precheck_passes(
    db, session_factory, make_room, make_user, monkeypatch
):
    # Every request sees an empty slot, as if all reads happened before any write
    monkeypatch.setattr(ScheduleRepository, "find_conflicting", lambda self, *args, **kwargs: None)
    room_id = make_room().id
    user_ids = [make_user().id for _ in range(ATTEMPTS)]

    successes, refusals = race_for_slot(session_factory, user_ids, room_id, 480)

    assert len(successes) == 1
    assert len(refusals) == ATTEMPTS - 1
    assert active_bookings(db, room_id) == 1


@pytest.mark.parametrize("cancel_first", [True, False])
def test_cancelled_row_never_blocks_the_race(db, session_factory, make_room, make_user, make_schedule, cancel_first):
    room = make_room()
    if cancel_first:
        make_schedule(make_user(), room, start="08:00", status=ScheduleStatus.CANCELLED)
    room_id = room.id
    user_ids = [make_user().id for _ in range(4)]

    successes, _ = race_for_slot(session_factory, user_ids, room_id, 480)

    assert len(successes) == 1
    assert active_bookings(db, room_id) == 1
