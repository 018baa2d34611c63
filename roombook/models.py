import enum
import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_public_id():
    """Generate a unique public ID for records exposed over the API"""
    return str(uuid.uuid4())


class UserRole(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class ScheduleStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_public_id)
    name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default=UserRole.USER.value, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    schedules = relationship("Schedule", back_populates="user")
    logs = relationship("Log", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


class Room(Base):
    __tablename__ = "rooms"

    id = Column(String(36), primary_key=True, default=generate_public_id)
    name = Column(String(255), nullable=False)
    start_time = Column(Integer, nullable=False)  # minute of day, 0-1439
    end_time = Column(Integer, nullable=False)  # minute of day, exclusive
    slot_duration = Column(Integer, default=30, nullable=False)  # minutes, >= 15
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    schedules = relationship("Schedule", back_populates="room")


class Schedule(Base):
    __tablename__ = "schedules"
    __table_args__ = (
        # One active booking per room/date/slot. This index is the real guard
        # against double booking; the service-level check only short-circuits.
        Index(
            "uq_schedules_active_slot",
            "room_id",
            "date",
            "start_time",
            unique=True,
            postgresql_where=text("status <> 'CANCELLED'"),
            sqlite_where=text("status <> 'CANCELLED'"),
        ),
    )

    id = Column(String(36), primary_key=True, default=generate_public_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    room_id = Column(String(36), ForeignKey("rooms.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    start_time = Column(Integer, nullable=False)  # minute of day
    end_time = Column(Integer, nullable=False)  # start_time + room.slot_duration at booking time
    status = Column(String(20), default=ScheduleStatus.PENDING.value, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="schedules")
    room = relationship("Room", back_populates="schedules")


class Log(Base):
    __tablename__ = "logs"

    id = Column(String(36), primary_key=True, default=generate_public_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    action = Column(String(255), nullable=False)
    module = Column(String(255), nullable=False)
    details = Column(JSON, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), index=True)

    user = relationship("User", back_populates="logs")
