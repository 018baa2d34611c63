import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from roombook.database import Base, build_engine, get_db  # noqa: E402
from roombook.main import app  # noqa: E402
from roombook.models import Room, Schedule, ScheduleStatus, User, UserRole  # noqa: E402
from roombook.security_utils import create_jwt_token  # noqa: E402
from roombook.shared.validators import parse_time_of_day  # noqa: E402

BOOKING_DATE = date(2026, 1, 8)


@pytest.fixture
def engine(tmp_path):
    # File-backed so concurrent threads share one database
    test_engine = build_engine(f"sqlite:///{tmp_path / 'roombook-test.db'}")
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(role=UserRole.USER, name="Ana", last_name="Silva", email=None):
        counter["n"] += 1
        user = User(
            name=name,
            last_name=last_name,
            email=email or f"user{counter['n']}@example.com",
            password_hash="not-a-real-hash",
            role=role.value,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_room(db):
    def _make_room(name="Room A", start="08:00", end="10:00", slot_duration=60, is_active=True):
        room = Room(
            name=name,
            start_time=parse_time_of_day(start),
            end_time=parse_time_of_day(end),
            slot_duration=slot_duration,
            is_active=is_active,
        )
        db.add(room)
        db.commit()
        db.refresh(room)
        return room

    return _make_room


@pytest.fixture
def make_schedule(db):
    def _make_schedule(user, room, start="08:00", on_date=BOOKING_DATE, status=ScheduleStatus.PENDING):
        start_time = parse_time_of_day(start)
        schedule = Schedule(
            user_id=user.id,
            room_id=room.id,
            date=on_date,
            start_time=start_time,
            end_time=start_time + room.slot_duration,
            status=status.value,
        )
        db.add(schedule)
        db.commit()
        db.refresh(schedule)
        return schedule

    return _make_schedule


@pytest.fixture
def auth_headers():
    def _auth_headers(user) -> dict:
        return {"Authorization": f"Bearer {create_jwt_token({'sub': user.id, 'role': user.role})}"}

    return _auth_headers
