from __future__ import annotations

import enum
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.errors import InternalError, InvalidStatusError, MissingFieldError


logger = logging.getLogger(__name__)

E = TypeVar("E", bound=enum.Enum)


def require_text(value: str | None, name: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise MissingFieldError(name)
    return cleaned


def parse_enum(enum_cls: type[E], raw: str | None, *, field: str = "status") -> E:
    """Map a free-form status/role string onto a closed enumeration (case-insensitive)."""

    value = (raw or "").strip().upper()
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidStatusError(raw, field=field) from None


@contextmanager
def storage_guard(db: Session, *, operation: str, entity: str, identifier: object) -> Iterator[None]:
    """Roll back and wrap unexpected storage failures with the operation context.

    Domain errors pass through untouched, after the transaction (and any row
    locks it holds) is rolled back.
    """

    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Storage failure during %s of %s %s", operation, entity, identifier, exc_info=exc)
        raise InternalError(
            f"Failed to {operation} {entity} {identifier}",
            operation=operation,
            entity=entity,
            identifier=identifier,
        ) from exc
    except Exception:
        db.rollback()
        raise
