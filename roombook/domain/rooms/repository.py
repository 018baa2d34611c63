"""Room repository - Database operations for rooms"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Room


class RoomRepository:
    """Repository for room database operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, room_id: str) -> Optional[Room]:
        return self.db.query(Room).filter(Room.id == room_id).first()

    def get_active(self, room_id: str) -> Optional[Room]:
        """Get a room that is still open for booking"""
        return self.db.query(Room).filter(Room.id == room_id, Room.is_active.is_(True)).first()

    def list_active(self) -> list[Room]:
        return self.db.query(Room).filter(Room.is_active.is_(True)).order_by(Room.name.asc()).all()

    def insert_many(self, rooms_data: list[dict]) -> list[Room]:
        """Create several rooms in one transaction"""
        rooms = [Room(**data) for data in rooms_data]
        self.db.add_all(rooms)
        self.db.commit()
        for room in rooms:
            self.db.refresh(room)
        return rooms

    def update(self, room: Room, **updates) -> Room:
        """Update a room with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(room, key):
                setattr(room, key, value)

        self.db.commit()
        self.db.refresh(room)
        return room
