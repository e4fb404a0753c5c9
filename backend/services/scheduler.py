from __future__ import annotations

import logging
import math
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from core.errors import PersonnelNotFoundError, SessionNotFoundError
from core.locks import hold_references, room_locks, session_locks
from models.course_session import CourseSession, SessionStatus
from models.personnel import Personnel
from schemas.course_session import SessionRequest
from services.common import parse_enum, storage_guard
from services.course_service import get_course
from services.personnel_service import get_personnel
from services.room_gate import check_availability
from services.session_validator import validate_session_request


logger = logging.getLogger(__name__)


def derive_hours(start: datetime, end: datetime) -> int:
    """Whole hours covered by the window, rounded up (a 90 minute slot counts as 2)."""

    return max(1, math.ceil((end - start).total_seconds() / 3600))


def _resolve_personnel(db: Session, personnel_code: str | None, *, role: str) -> Personnel:
    code = (personnel_code or "").strip()
    try:
        return get_personnel(db, code, lock="share")
    except PersonnelNotFoundError:
        raise PersonnelNotFoundError(code, role=role) from None


def _reference_codes(payload: SessionRequest) -> dict:
    return {
        "course_codes": [(payload.course_code or "").strip()],
        "personnel_codes": [(payload.submitter_code or "").strip(), (payload.validator_code or "").strip()],
    }


def get_session(db: Session, session_id: int) -> CourseSession:
    session = db.get(CourseSession, session_id)
    if session is None:
        raise SessionNotFoundError(session_id)
    return session


def list_sessions(db: Session) -> list[CourseSession]:
    return list(db.execute(select(CourseSession).order_by(CourseSession.id.asc())).scalars().all())


def create_session(db: Session, payload: SessionRequest, *, actor: str) -> CourseSession:
    """Book a room for a course occurrence.

    Validation, the room availability check, reference resolution and the
    insert run as one unit under the room's lock and the locks of the
    referenced course and personnel: nothing is written unless every step
    succeeds, and a concurrent status change of the room or delete of a
    reference is ordered either entirely before or entirely after the booking.
    """

    validate_session_request(payload)
    room_code = payload.room_code.strip()
    course_code = payload.course_code.strip()

    logger.info(
        "Session creation requested by %r: course=%s room=%s start=%s end=%s",
        actor,
        course_code,
        room_code,
        payload.start.isoformat(),
        payload.end.isoformat(),
    )

    with room_locks.hold(room_code), hold_references(**_reference_codes(payload)):
        with storage_guard(db, operation="create", entity="session", identifier=f"room={room_code}"):
            room = check_availability(db, room_code=room_code)
            course = get_course(db, course_code, lock="share")
            submitter = _resolve_personnel(db, payload.submitter_code, role="Submitting")
            validator = _resolve_personnel(db, payload.validator_code, role="Validating")

            session = CourseSession(
                hours=payload.hours or derive_hours(payload.start, payload.end),
                start=payload.start,
                end=payload.end,
                status=SessionStatus.PENDING.value,
                course=course,
                room=room,
                submitter=submitter,
                validator=validator,
            )
            db.add(session)
            db.commit()
            db.refresh(session)

    logger.info("Session %s created by %r in room %s", session.id, actor, room_code)
    return session


def update_session(db: Session, session_id: int, payload: SessionRequest, *, actor: str) -> CourseSession:
    """Re-validate and overwrite a session.

    The booked room is kept and its availability is not re-checked. Status is
    replaced only when supplied; any known workflow value is accepted.
    """

    with session_locks.hold(session_id), hold_references(**_reference_codes(payload)):
        with storage_guard(db, operation="update", entity="session", identifier=session_id):
            session = db.execute(
                select(CourseSession).where(CourseSession.id == session_id).with_for_update(of=CourseSession)
            ).scalars().first()
            if session is None:
                raise SessionNotFoundError(session_id)

            validate_session_request(payload)
            course = get_course(db, payload.course_code.strip(), lock="share")
            submitter = _resolve_personnel(db, payload.submitter_code, role="Submitting")
            validator = _resolve_personnel(db, payload.validator_code, role="Validating")
            status = (
                parse_enum(SessionStatus, payload.status)
                if payload.status is not None
                else SessionStatus(session.status)
            )

            requested_room = payload.room_code.strip()
            if requested_room != session.room_code:
                logger.warning(
                    "Session %s update names room %s; booking stays in room %s",
                    session_id,
                    requested_room,
                    session.room_code,
                )

            previous_status = session.status
            session.hours = payload.hours or derive_hours(payload.start, payload.end)
            session.start = payload.start
            session.end = payload.end
            session.course = course
            session.submitter = submitter
            session.validator = validator
            session.status = status.value
            db.commit()
            db.refresh(session)

    if previous_status != session.status:
        logger.info("Session %s status changed by %r: %s -> %s", session_id, actor, previous_status, session.status)
    logger.info("Session %s updated by %r", session_id, actor)
    return session


def delete_session(db: Session, session_id: int, *, actor: str) -> None:
    logger.warning("Session %s deletion requested by %r", session_id, actor)

    with session_locks.hold(session_id), storage_guard(db, operation="delete", entity="session", identifier=session_id):
        session = db.get(CourseSession, session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        db.delete(session)
        db.commit()


def delete_all_sessions(db: Session, *, actor: str) -> int:
    logger.error("Deletion of ALL sessions requested by %r", actor)

    with storage_guard(db, operation="delete", entity="session", identifier="*"):
        result = db.execute(delete(CourseSession))
        db.commit()

    deleted = int(result.rowcount or 0)
    logger.warning("%d sessions deleted by %r", deleted, actor)
    return deleted
