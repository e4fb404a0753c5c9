from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.errors import AssignmentNotFoundError, DuplicateAssignmentError, MissingFieldError
from core.locks import assignment_locks, hold_references
from models.assignment import Assignment, AssignmentKey
from services.common import storage_guard
from services.course_service import get_course
from services.personnel_service import get_personnel


logger = logging.getLogger(__name__)


def _key(course_code: str | None, personnel_code: str | None) -> AssignmentKey:
    course = (course_code or "").strip()
    personnel = (personnel_code or "").strip()
    if not personnel:
        raise MissingFieldError("personnel_code")
    if not course:
        raise MissingFieldError("course_code")
    return AssignmentKey(course, personnel)


def list_assignments(db: Session) -> list[Assignment]:
    q = select(Assignment).order_by(Assignment.course_code.asc(), Assignment.personnel_code.asc())
    return list(db.execute(q).scalars().all())


def get_assignment(db: Session, course_code: str, personnel_code: str) -> Assignment:
    key = _key(course_code, personnel_code)
    assignment = db.get(Assignment, key)
    if assignment is None:
        raise AssignmentNotFoundError(*key)
    return assignment


def create_assignment(db: Session, course_code: str | None, personnel_code: str | None, *, actor: str) -> Assignment:
    key = _key(course_code, personnel_code)
    logger.info("Assignment requested by %r: personnel %s -> course %s", actor, key.personnel_code, key.course_code)

    references = hold_references(course_codes=[key.course_code], personnel_codes=[key.personnel_code])
    with assignment_locks.hold(key), references:
        with storage_guard(db, operation="create", entity="assignment", identifier=key):
            if db.get(Assignment, key) is not None:
                raise DuplicateAssignmentError(*key)

            personnel = get_personnel(db, key.personnel_code, lock="share")
            course = get_course(db, key.course_code, lock="share")

            assignment = Assignment(
                course_code=course.code,
                personnel_code=personnel.code,
                course=course,
                personnel=personnel,
            )
            db.add(assignment)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                raise DuplicateAssignmentError(*key)
            db.refresh(assignment)

    logger.info("Assignment created: personnel %s -> course %s", key.personnel_code, key.course_code)
    return assignment


def delete_assignment(db: Session, course_code: str, personnel_code: str, *, actor: str) -> None:
    key = _key(course_code, personnel_code)

    with assignment_locks.hold(key), storage_guard(db, operation="delete", entity="assignment", identifier=key):
        assignment = db.get(Assignment, key)
        if assignment is None:
            raise AssignmentNotFoundError(*key)
        db.delete(assignment)
        db.commit()

    logger.info("Assignment deleted by %r: personnel %s -> course %s", actor, key.personnel_code, key.course_code)
