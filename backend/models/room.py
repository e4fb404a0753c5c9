from __future__ import annotations

import enum

from sqlalchemy import CheckConstraint, Column, DateTime, Enum, Integer, Text
from sqlalchemy.sql import func

from models.base import Base


class RoomStatus(str, enum.Enum):
    FREE = "FREE"
    OCCUPIED = "OCCUPIED"
    CLOSED = "CLOSED"


ROOM_STATUS = Enum(
    *[s.value for s in RoomStatus],
    name="room_status",
    native_enum=False,
    create_constraint=True,
    length=20,
)


class Room(Base):
    __tablename__ = "rooms"

    code = Column(Text, primary_key=True)
    description = Column(Text, nullable=False)
    capacity = Column(Integer, nullable=True)
    status = Column(ROOM_STATUS, nullable=False, default=RoomStatus.FREE.value)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("capacity is null or capacity > 0", name="ck_rooms_capacity"),
    )
