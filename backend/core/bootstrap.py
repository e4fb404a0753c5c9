from __future__ import annotations

import logging

from sqlalchemy.engine import Engine

import models  # noqa: F401  (registers every mapped table on Base.metadata)
from core.config import settings
from core.database import ENGINE, SessionLocal
from models.base import Base


logger = logging.getLogger(__name__)


def ensure_schema(engine: Engine | None = None) -> None:
    # Idempotent: create_all skips tables that already exist.
    Base.metadata.create_all(bind=engine or ENGINE)


def seed_admin_if_configured() -> str | None:
    """Create the configured administrative personnel unless its login already exists.

    Returns the personnel code when a row was created.
    """

    login = settings.seed_admin_login
    password = settings.seed_admin_password
    if not login or not password:
        return None

    from schemas.personnel import PersonnelCreate
    from services.personnel_service import create_personnel, get_personnel_by_login

    db = SessionLocal()
    try:
        if get_personnel_by_login(db, login) is not None:
            return None
        personnel = create_personnel(
            db,
            PersonnelCreate(
                name=settings.seed_admin_name,
                login=login,
                password=password,
                role="ADMINISTRATIVE",
            ),
            actor="bootstrap",
        )
    finally:
        db.close()

    logger.warning(
        "Seeded initial administrative personnel from env (login=%r, code=%s). Change the password after first login.",
        login,
        personnel.code,
    )
    return personnel.code


def bootstrap() -> None:
    """Best-effort startup bootstrap.

    - Ensures the schema exists (when AUTO_CREATE_SCHEMA is on).
    - Optionally seeds an administrative personnel if SEED_ADMIN_LOGIN + SEED_ADMIN_PASSWORD are set.

    This function is safe to run on every startup.
    """

    if settings.auto_create_schema:
        ensure_schema()
    seed_admin_if_configured()
