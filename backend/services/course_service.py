from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.errors import ConflictError, CourseNotFoundError, EntityInUseError, ValidationError
from core.locks import course_locks
from models.assignment import Assignment
from models.course import Course
from models.course_session import CourseSession
from schemas.course import CourseCreate, CoursePut
from services.common import require_text, storage_guard


logger = logging.getLogger(__name__)


def _validate_counts(*, credits: int, hours: int) -> None:
    errors: list[str] = []
    if int(credits) < 0:
        errors.append("CREDITS_NEGATIVE")
    if int(hours) < 0:
        errors.append("HOURS_NEGATIVE")
    if errors:
        raise ValidationError("Invalid course figures", code="INVALID_COURSE", errors=",".join(errors))


def get_course(db: Session, course_code: str, *, lock: str | None = None) -> Course:
    """Fetch a course or raise ``CourseNotFoundError``.

    ``lock="share"`` reads the row ``FOR SHARE`` for writes that will reference
    it; ``lock="update"`` reads it ``FOR UPDATE`` before removing it.
    """

    course = None
    if course_code:
        if lock is None:
            course = db.get(Course, course_code)
        else:
            q = select(Course).where(Course.code == course_code).with_for_update(read=lock == "share")
            course = db.execute(q).scalars().first()
    if course is None:
        raise CourseNotFoundError(course_code)
    return course


def list_courses(
    db: Session,
    *,
    label: str | None = None,
    min_credits: int | None = None,
    min_hours: int | None = None,
) -> list[Course]:
    q = select(Course)
    if label:
        q = q.where(func.lower(Course.label).contains(label.strip().lower(), autoescape=True))
    if min_credits is not None:
        q = q.where(Course.credits >= int(min_credits))
    if min_hours is not None:
        q = q.where(Course.hours >= int(min_hours))
    return list(db.execute(q.order_by(Course.code.asc())).scalars().all())


def course_exists(db: Session, course_code: str) -> bool:
    code = require_text(course_code, "course_code")
    return db.execute(select(Course.code).where(Course.code == code).limit(1)).first() is not None


def count_courses(db: Session) -> int:
    return int(db.execute(select(func.count()).select_from(Course)).scalar_one())


def create_course(db: Session, payload: CourseCreate, *, actor: str) -> Course:
    code = require_text(payload.code, "code")
    label = require_text(payload.label, "label")
    _validate_counts(credits=payload.credits, hours=payload.hours)

    logger.info("Course creation requested by %r: code=%s label=%r", actor, code, label)

    with course_locks.hold(code), storage_guard(db, operation="create", entity="course", identifier=code):
        if db.get(Course, code) is not None:
            raise ConflictError(f"A course already exists with code {code}", code="COURSE_CODE_ALREADY_EXISTS")

        course = Course(
            code=code,
            label=label,
            description=payload.description,
            credits=int(payload.credits),
            hours=int(payload.hours),
        )
        db.add(course)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError(f"A course already exists with code {code}", code="COURSE_CODE_ALREADY_EXISTS")
        db.refresh(course)
    return course


def update_course(db: Session, course_code: str, payload: CoursePut, *, actor: str) -> Course:
    code = require_text(course_code, "course_code")
    label = require_text(payload.label, "label")
    _validate_counts(credits=payload.credits, hours=payload.hours)

    with course_locks.hold(code), storage_guard(db, operation="update", entity="course", identifier=code):
        course = get_course(db, code)
        course.label = label
        course.description = payload.description
        course.credits = int(payload.credits)
        course.hours = int(payload.hours)
        db.commit()
        db.refresh(course)

    logger.info("Course %s updated by %r", code, actor)
    return course


def delete_course(db: Session, course_code: str, *, actor: str) -> None:
    """Delete a course nobody references; sessions and assignments keep it alive."""

    code = require_text(course_code, "course_code")

    with course_locks.hold(code), storage_guard(db, operation="delete", entity="course", identifier=code):
        course = get_course(db, code, lock="update")

        used_by_sessions = (
            db.execute(select(CourseSession.id).where(CourseSession.course_code == code).limit(1)).first()
            is not None
        )
        used_by_assignments = (
            db.execute(select(Assignment.course_code).where(Assignment.course_code == code).limit(1)).first()
            is not None
        )
        if used_by_sessions or used_by_assignments:
            raise EntityInUseError(
                f"Course {code} is still referenced",
                code="COURSE_IN_USE",
                sessions=used_by_sessions,
                assignments=used_by_assignments,
            )

        db.delete(course)
        db.commit()

    logger.warning("Course %s deleted by %r", code, actor)
