from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.errors import ConflictError, EntityInUseError, RoomNotFoundError, ValidationError
from core.locks import room_locks
from models.course_session import CourseSession
from models.room import Room, RoomStatus
from schemas.room import RoomCreate, RoomUpdate
from services.common import parse_enum, require_text, storage_guard


logger = logging.getLogger(__name__)


def _validate_capacity(capacity: int | None) -> None:
    if capacity is not None and int(capacity) <= 0:
        raise ValidationError("Room capacity must be greater than zero", code="INVALID_CAPACITY", capacity=capacity)


def get_room(db: Session, room_code: str) -> Room:
    room = db.get(Room, room_code) if room_code else None
    if room is None:
        raise RoomNotFoundError(room_code)
    return room


def list_rooms(
    db: Session,
    *,
    status: str | None = None,
    min_capacity: int | None = None,
) -> list[Room]:
    q = select(Room)
    if status is not None:
        q = q.where(Room.status == parse_enum(RoomStatus, status).value)
    if min_capacity is not None:
        if int(min_capacity) < 0:
            raise ValidationError("Minimum capacity cannot be negative", code="INVALID_CAPACITY")
        q = q.where(Room.capacity >= int(min_capacity))
    rooms = db.execute(q.order_by(Room.code.asc())).scalars().all()
    logger.debug("Listed %d rooms (status=%s, min_capacity=%s)", len(rooms), status, min_capacity)
    return list(rooms)


def room_exists(db: Session, room_code: str) -> bool:
    code = require_text(room_code, "room_code")
    return db.execute(select(Room.code).where(Room.code == code).limit(1)).first() is not None


def count_rooms(db: Session) -> int:
    return int(db.execute(select(func.count()).select_from(Room)).scalar_one())


def create_room(db: Session, payload: RoomCreate, *, actor: str) -> Room:
    code = require_text(payload.code, "code")
    description = require_text(payload.description, "description")
    status = parse_enum(RoomStatus, require_text(payload.status, "status"))
    _validate_capacity(payload.capacity)

    logger.info("Room creation requested by %r: code=%s status=%s", actor, code, status.value)

    with room_locks.hold(code), storage_guard(db, operation="create", entity="room", identifier=code):
        if db.get(Room, code) is not None:
            raise ConflictError(f"A room already exists with code {code}", code="ROOM_CODE_ALREADY_EXISTS")

        room = Room(code=code, description=description, capacity=payload.capacity, status=status.value)
        db.add(room)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError(f"A room already exists with code {code}", code="ROOM_CODE_ALREADY_EXISTS")
        db.refresh(room)

    logger.info("Room created: code=%s capacity=%s status=%s", room.code, room.capacity, room.status)
    return room


def update_room(db: Session, room_code: str, payload: RoomUpdate, *, actor: str) -> Room:
    """Apply the provided fields only. Status changes share the room lock with bookings."""

    code = require_text(room_code, "room_code")
    updates = payload.model_dump(exclude_unset=True)

    if "description" in updates and updates["description"] is not None:
        updates["description"] = require_text(updates["description"], "description")
    if "capacity" in updates:
        _validate_capacity(updates["capacity"])
    if updates.get("status") is not None:
        updates["status"] = parse_enum(RoomStatus, updates["status"]).value

    with room_locks.hold(code), storage_guard(db, operation="update", entity="room", identifier=code):
        room = db.execute(select(Room).where(Room.code == code).with_for_update()).scalars().first()
        if room is None:
            raise RoomNotFoundError(code)

        previous_status = room.status
        for k, v in updates.items():
            if v is None:
                continue
            setattr(room, k, v)
        db.commit()
        db.refresh(room)

    if previous_status != room.status:
        logger.info("Room %s status changed by %r: %s -> %s", code, actor, previous_status, room.status)
    else:
        logger.info("Room %s updated by %r", code, actor)
    return room


def delete_room(db: Session, room_code: str, *, actor: str) -> None:
    code = require_text(room_code, "room_code")

    with room_locks.hold(code), storage_guard(db, operation="delete", entity="room", identifier=code):
        room = db.get(Room, code)
        if room is None:
            raise RoomNotFoundError(code)

        in_use = (
            db.execute(select(CourseSession.id).where(CourseSession.room_code == code).limit(1)).first()
            is not None
        )
        if in_use:
            raise EntityInUseError(f"Room {code} is referenced by scheduled sessions", code="ROOM_IN_USE")

        db.delete(room)
        db.commit()

    logger.info("Room %s deleted by %r", code, actor)
