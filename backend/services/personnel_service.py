from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.errors import ConflictError, EntityInUseError, MissingFieldError, PersonnelNotFoundError
from core.locks import personnel_locks
from core.security import hash_password, verify_password
from models.assignment import Assignment
from models.course_session import CourseSession
from models.personnel import Personnel, PersonnelRole
from schemas.personnel import PersonnelCreate, PersonnelPut
from services.common import parse_enum, require_text, storage_guard


logger = logging.getLogger(__name__)


CODE_PREFIXES: dict[PersonnelRole, str] = {
    PersonnelRole.ADMINISTRATIVE: "ADM",
    PersonnelRole.INSTRUCTOR: "INS",
    PersonnelRole.HEAD_OF_DEPARTMENT: "HOD",
}
CODE_DIGITS = 4


def generate_personnel_code(db: Session, role: PersonnelRole) -> str:
    """Next free code for a role: its prefix followed by a zero-padded sequence.

    Callers must hold the role's lock until the new row is committed.
    """

    prefix = CODE_PREFIXES[role]
    existing = db.execute(select(Personnel.code).where(Personnel.code.like(f"{prefix}%"))).scalars().all()
    highest = 0
    for code in existing:
        suffix = code[len(prefix):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return f"{prefix}{highest + 1:0{CODE_DIGITS}d}"


def _find_by_login(db: Session, login: str) -> Personnel | None:
    # Be forgiving about casing/whitespace on input.
    q = select(Personnel).where(func.lower(Personnel.login) == func.lower(login.strip()))
    return db.execute(q).scalars().first()


def get_personnel(db: Session, personnel_code: str, *, lock: str | None = None) -> Personnel:
    """Fetch personnel by code; ``lock`` works as in ``course_service.get_course``."""

    personnel = None
    if personnel_code:
        if lock is None:
            personnel = db.get(Personnel, personnel_code)
        else:
            q = select(Personnel).where(Personnel.code == personnel_code).with_for_update(read=lock == "share")
            personnel = db.execute(q).scalars().first()
    if personnel is None:
        raise PersonnelNotFoundError(personnel_code)
    return personnel


def get_personnel_by_login(db: Session, login: str) -> Personnel | None:
    return _find_by_login(db, login) if login else None


def list_personnel(db: Session, *, role: str | None = None) -> list[Personnel]:
    q = select(Personnel)
    if role is not None:
        q = q.where(Personnel.role == parse_enum(PersonnelRole, role, field="role").value)
    return list(db.execute(q.order_by(Personnel.name.asc(), Personnel.code.asc())).scalars().all())


def personnel_exists(db: Session, personnel_code: str) -> bool:
    code = require_text(personnel_code, "personnel_code")
    return db.execute(select(Personnel.code).where(Personnel.code == code).limit(1)).first() is not None


def count_personnel(db: Session) -> int:
    return int(db.execute(select(func.count()).select_from(Personnel)).scalar_one())


def create_personnel(db: Session, payload: PersonnelCreate, *, actor: str) -> Personnel:
    name = require_text(payload.name, "name")
    login = require_text(payload.login, "login")
    if not (payload.password or "").strip():
        raise MissingFieldError("password")
    role = parse_enum(PersonnelRole, require_text(payload.role, "role"), field="role")

    logger.info("Personnel creation requested by %r: login=%r role=%s", actor, login, role.value)

    with personnel_locks.hold(role), storage_guard(db, operation="create", entity="personnel", identifier=login):
        if _find_by_login(db, login) is not None:
            logger.warning("Personnel creation rejected (login taken): login=%r", login)
            raise ConflictError(f"Login already in use: {login}", code="LOGIN_ALREADY_EXISTS")

        personnel = Personnel(
            code=generate_personnel_code(db, role),
            name=name,
            login=login,
            password_hash=hash_password(payload.password),
            sex=(payload.sex or "").strip() or None,
            role=role.value,
        )
        db.add(personnel)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError(f"Login already in use: {login}", code="LOGIN_ALREADY_EXISTS")
        db.refresh(personnel)

    logger.info("Personnel created: code=%s login=%r role=%s", personnel.code, personnel.login, personnel.role)
    return personnel


def update_personnel(db: Session, personnel_code: str, payload: PersonnelPut, *, actor: str) -> Personnel:
    code = require_text(personnel_code, "personnel_code")
    name = require_text(payload.name, "name")
    login = require_text(payload.login, "login")
    role = parse_enum(PersonnelRole, require_text(payload.role, "role"), field="role")

    with personnel_locks.hold(code), storage_guard(db, operation="update", entity="personnel", identifier=code):
        personnel = get_personnel(db, code)

        other = _find_by_login(db, login)
        if other is not None and other.code != personnel.code:
            raise ConflictError(f"Login already in use: {login}", code="LOGIN_ALREADY_EXISTS")

        # The code is immutable even when the role changes.
        personnel.name = name
        personnel.login = login
        personnel.sex = (payload.sex or "").strip() or None
        personnel.role = role.value
        if payload.password is not None and payload.password.strip():
            personnel.password_hash = hash_password(payload.password)

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError(f"Login already in use: {login}", code="LOGIN_ALREADY_EXISTS")
        db.refresh(personnel)

    logger.info("Personnel %s updated by %r", code, actor)
    return personnel


def delete_personnel(db: Session, personnel_code: str, *, actor: str) -> None:
    code = require_text(personnel_code, "personnel_code")

    with personnel_locks.hold(code), storage_guard(db, operation="delete", entity="personnel", identifier=code):
        personnel = get_personnel(db, code, lock="update")

        used_by_sessions = (
            db.execute(
                select(CourseSession.id)
                .where((CourseSession.submitter_code == code) | (CourseSession.validator_code == code))
                .limit(1)
            ).first()
            is not None
        )
        used_by_assignments = (
            db.execute(select(Assignment.personnel_code).where(Assignment.personnel_code == code).limit(1)).first()
            is not None
        )
        if used_by_sessions or used_by_assignments:
            raise EntityInUseError(
                f"Personnel {code} is still referenced",
                code="PERSONNEL_IN_USE",
                sessions=used_by_sessions,
                assignments=used_by_assignments,
            )

        db.delete(personnel)
        db.commit()

    logger.warning("Personnel %s deleted by %r", code, actor)


def authenticate(db: Session, *, login: str, password: str) -> Personnel | None:
    personnel = get_personnel_by_login(db, login)
    if personnel is None:
        return None
    if not verify_password(password, personnel.password_hash):
        return None
    return personnel
