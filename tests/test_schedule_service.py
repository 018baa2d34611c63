"""Tests for the booking lifecycle"""

from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from roombook.domain.schedules.service import build_schedule_service
from roombook.models import Log, Schedule, ScheduleStatus, UserRole
from roombook.shared.exceptions import (
    InvalidSlot,
    RoomNotFound,
    ScheduleNotFound,
    SlotUnavailable,
)
from roombook.shared.validators import format_time_of_day, parse_time_of_day

BOOKING_DATE = date(2026, 1, 8)


def logs_for(db, action):
    return db.query(Log).filter(Log.action == action).all()


# ─── create ───────────────────────────────────────────────────────────────────


def test_create_books_a_pending_slot_and_logs_it(db, make_room, make_user):
    room = make_room()
    user = make_user()

    schedule = build_schedule_service(db).create(user.id, room.id, BOOKING_DATE, parse_time_of_day("08:00"))

    assert schedule.status == ScheduleStatus.PENDING.value
    assert schedule.user_id == user.id
    assert schedule.date == BOOKING_DATE

    entries = logs_for(db, "Schedule created")
    assert len(entries) == 1
    assert entries[0].user_id == user.id
    assert entries[0].module == "Scheduling"
    assert entries[0].details == {
        "scheduleId": schedule.id,
        "date": "2026-01-08",
        "startTime": "08:00",
    }


def test_end_time_is_start_plus_slot_duration(db, make_room, make_user):
    room = make_room(start="14:30", end="18:00", slot_duration=45)

    schedule = build_schedule_service(db).create(
        make_user().id, room.id, BOOKING_DATE, parse_time_of_day("14:30")
    )

    assert format_time_of_day(schedule.end_time) == "15:15"


def test_end_time_is_not_rederived_when_room_changes(db, make_room, make_user):
    room = make_room(slot_duration=60)
    schedule = build_schedule_service(db).create(make_user().id, room.id, BOOKING_DATE, 480)

    room.slot_duration = 30
    db.commit()
    db.refresh(schedule)

    assert schedule.end_time == 540


def test_create_in_missing_room_fails(db, make_user):
    with pytest.raises(RoomNotFound):
        build_schedule_service(db).create(
            make_user().id, "00000000-0000-0000-0000-000000000000", BOOKING_DATE, 480
        )


def test_create_in_inactive_room_fails(db, make_room, make_user):
    room = make_room(is_active=False)

    with pytest.raises(RoomNotFound):
        build_schedule_service(db).create(make_user().id, room.id, BOOKING_DATE, 480)


@pytest.mark.parametrize("start", ["07:00", "08:30", "10:00"])
def test_create_off_grid_fails(db, make_room, make_user, start):
    room = make_room(start="08:00", end="10:00", slot_duration=60)

    with pytest.raises(InvalidSlot):
        build_schedule_service(db).create(make_user().id, room.id, BOOKING_DATE, parse_time_of_day(start))


def test_second_booking_for_same_slot_fails(db, make_room, make_user):
    room = make_room()
    service = build_schedule_service(db)
    service.create(make_user().id, room.id, BOOKING_DATE, 480)

    with pytest.raises(SlotUnavailable):
        service.create(make_user().id, room.id, BOOKING_DATE, 480)

    assert db.query(Schedule).count() == 1
    assert len(logs_for(db, "Schedule created")) == 1


def test_slot_can_be_rebooked_after_cancellation(db, make_room, make_user):
    room = make_room()
    service = build_schedule_service(db)
    first = service.create(make_user().id, room.id, BOOKING_DATE, 480)
    service.update_status(first.id, ScheduleStatus.CANCELLED)

    second = service.create(make_user().id, room.id, BOOKING_DATE, 480)

    assert second.id != first.id
    assert second.status == ScheduleStatus.PENDING.value


def test_constraint_rejects_insert_when_precheck_is_bypassed(db, make_room, make_user, monkeypatch):
    """Simulates two requests that both passed the existence check"""
    room = make_room()
    service = build_schedule_service(db)
    service.create(make_user().id, room.id, BOOKING_DATE, 480)

    monkeypatch.setattr(service.ledger, "find_conflicting", lambda *args, **kwargs: None)

    with pytest.raises(SlotUnavailable):
        service.create(make_user().id, room.id, BOOKING_DATE, 480)

    active = db.query(Schedule).filter(Schedule.status != ScheduleStatus.CANCELLED.value).count()
    assert active == 1


def test_audit_failure_does_not_undo_booking(db, make_room, make_user, monkeypatch):
    room = make_room()
    service = build_schedule_service(db)

    def broken_insert(*args, **kwargs):
        raise SQLAlchemyError("log table unavailable")

    monkeypatch.setattr(service.logs.repo, "insert", broken_insert)

    schedule = service.create(make_user().id, room.id, BOOKING_DATE, 480)

    assert db.query(Schedule).filter(Schedule.id == schedule.id).count() == 1
    assert db.query(Log).count() == 0


# ─── update_status ────────────────────────────────────────────────────────────


def test_update_status_of_missing_schedule_fails(db):
    with pytest.raises(ScheduleNotFound):
        build_schedule_service(db).update_status(
            "00000000-0000-0000-0000-000000000000", ScheduleStatus.CONFIRMED
        )


def test_any_status_can_follow_any_other(db, make_room, make_user, make_schedule):
    schedule = make_schedule(make_user(), make_room())
    service = build_schedule_service(db)

    for status in [
        ScheduleStatus.COMPLETED,
        ScheduleStatus.PENDING,
        ScheduleStatus.CANCELLED,
        ScheduleStatus.CONFIRMED,
    ]:
        assert service.update_status(schedule.id, status).status == status.value


def test_confirm_is_not_audited(db, make_room, make_user, make_schedule):
    schedule = make_schedule(make_user(), make_room())

    build_schedule_service(db).update_status(schedule.id, ScheduleStatus.CONFIRMED)

    assert db.query(Log).count() == 0


def test_cancel_logs_once_per_call(db, make_room, make_user, make_schedule):
    owner = make_user()
    schedule = make_schedule(owner, make_room())
    service = build_schedule_service(db)

    service.update_status(schedule.id, ScheduleStatus.CANCELLED)
    service.update_status(schedule.id, ScheduleStatus.CANCELLED)

    entries = logs_for(db, "Schedule cancelled")
    assert len(entries) == 2
    assert {e.user_id for e in entries} == {owner.id}
    assert entries[0].details == {"scheduleId": schedule.id, "status": "CANCELLED"}


def test_complete_is_logged_for_the_acting_admin(db, make_room, make_user, make_schedule):
    admin = make_user(role=UserRole.ADMIN)
    schedule = make_schedule(make_user(), make_room())

    build_schedule_service(db).update_status(schedule.id, ScheduleStatus.COMPLETED, actor_id=admin.id)

    entries = logs_for(db, "Schedule completed")
    assert len(entries) == 1
    assert entries[0].user_id == admin.id


def test_reactivating_a_rebooked_slot_fails(db, make_room, make_user, make_schedule):
    room = make_room()
    cancelled = make_schedule(make_user(), room, status=ScheduleStatus.CANCELLED)
    make_schedule(make_user(), room)
    service = build_schedule_service(db)

    with pytest.raises(SlotUnavailable):
        service.update_status(cancelled.id, ScheduleStatus.PENDING)

    db.expire_all()
    assert db.get(Schedule, cancelled.id).status == ScheduleStatus.CANCELLED.value


# ─── list_schedules ───────────────────────────────────────────────────────────


def test_pagination_math(db, make_room, make_user, make_schedule):
    room = make_room(start="00:00", end="23:00", slot_duration=60)
    user = make_user()
    for hour in range(15):
        make_schedule(user, room, start=f"{hour:02d}:00")
    service = build_schedule_service(db)

    first = service.list_schedules(user.id, is_admin=False, page=1, limit=10)
    second = service.list_schedules(user.id, is_admin=False, page=2, limit=10)
    beyond = service.list_schedules(user.id, is_admin=False, page=5, limit=10)

    assert (first["total"], first["totalPages"], len(first["data"])) == (15, 2, 10)
    assert (second["total"], second["totalPages"], len(second["data"])) == (15, 2, 5)
    assert (beyond["totalPages"], beyond["data"]) == (2, [])


def test_non_admin_only_sees_own_schedules(db, make_room, make_user, make_schedule):
    room = make_room()
    me = make_user()
    other = make_user()
    mine = make_schedule(me, room, start="08:00")
    make_schedule(other, room, start="09:00")
    service = build_schedule_service(db)

    result = service.list_schedules(me.id, is_admin=False, room_id=room.id, on_date=BOOKING_DATE)

    assert [s.id for s in result["data"]] == [mine.id]
    assert result["total"] == 1


def test_admin_sees_everyone(db, make_room, make_user, make_schedule):
    room = make_room()
    make_schedule(make_user(), room, start="08:00")
    make_schedule(make_user(), room, start="09:00")
    admin = make_user(role=UserRole.ADMIN)

    result = build_schedule_service(db).list_schedules(admin.id, is_admin=True)

    assert result["total"] == 2


def test_order_is_by_date_then_start_time(db, make_room, make_user, make_schedule):
    room = make_room()
    user = make_user()
    a = make_schedule(user, room, start="09:00", on_date=date(2026, 1, 8))
    b = make_schedule(user, room, start="08:00", on_date=date(2026, 1, 9))
    c = make_schedule(user, room, start="08:00", on_date=date(2026, 1, 8))
    service = build_schedule_service(db)

    asc = service.list_schedules(user.id, is_admin=False, order="ASC")
    desc = service.list_schedules(user.id, is_admin=False, order="DESC")

    assert [s.id for s in asc["data"]] == [c.id, a.id, b.id]
    assert [s.id for s in desc["data"]] == [b.id, a.id, c.id]


def test_query_matches_owner_name_or_email(db, make_room, make_user, make_schedule):
    room = make_room()
    carla = make_user(name="Carla", last_name="Mendes", email="carla@example.com")
    bruno = make_user(name="Bruno", last_name="Costa", email="bruno@corp.test")
    carla_booking = make_schedule(carla, room, start="08:00")
    bruno_booking = make_schedule(bruno, room, start="09:00")
    service = build_schedule_service(db)

    by_name = service.list_schedules(None, is_admin=True, query="carl")
    by_last_name = service.list_schedules(None, is_admin=True, query="COSTA")
    by_email = service.list_schedules(None, is_admin=True, query="corp.test")

    assert [s.id for s in by_name["data"]] == [carla_booking.id]
    assert [s.id for s in by_last_name["data"]] == [bruno_booking.id]
    assert [s.id for s in by_email["data"]] == [bruno_booking.id]


def test_other_integrity_errors_are_not_reported_as_taken_slots(db, make_room):
    room = make_room()
    service = build_schedule_service(db)

    # user_id is NOT NULL; the failure must not look like a booking conflict
    with pytest.raises(IntegrityError):
        service.create(None, room.id, BOOKING_DATE, 480)

    assert db.query(Schedule).count() == 0
    assert service.compute_availability(room.id, BOOKING_DATE) == [480, 540]
