from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.errors import RoomNotFoundError, RoomUnavailableError
from models.room import Room, RoomStatus


logger = logging.getLogger(__name__)


def check_availability(db: Session, *, room_code: str) -> Room:
    """Return the room when it may receive a new session.

    Availability is governed solely by the room's status flag; existing
    sessions' time windows are not consulted. The row is read ``FOR UPDATE``
    so the check stays valid for the rest of the caller's transaction.
    """

    room = (
        db.execute(select(Room).where(Room.code == room_code).with_for_update())
        .scalars()
        .first()
    )
    if room is None:
        raise RoomNotFoundError(room_code)

    if room.status != RoomStatus.FREE.value:
        logger.info("Room %s refused for booking (status=%s)", room_code, room.status)
        raise RoomUnavailableError(room_code, str(room.status))
    return room
