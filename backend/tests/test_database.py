from __future__ import annotations

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError

from core.database import get_engine, is_transient_db_connectivity_error, normalize_database_url


@pytest.mark.parametrize(
    "raw",
    [
        "postgresql://u:p@db:5432/app",
        "postgres://u:p@db:5432/app",
        "postgresql+psycopg://u:p@db:5432/app",
        "  postgresql://u:p@db:5432/app ",
    ],
)
def test_postgres_urls_use_psycopg2(raw):
    assert normalize_database_url(raw) == "postgresql+psycopg2://u:p@db:5432/app"


def test_other_urls_are_left_alone():
    assert normalize_database_url("sqlite:///./app.db") == "sqlite:///./app.db"


def test_constraint_errors_are_not_transient():
    exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: personnel.login"))
    assert not is_transient_db_connectivity_error(exc)


def test_timeouts_are_transient():
    exc = OperationalError("SELECT 1", {}, Exception("connection to server timed out"))
    assert is_transient_db_connectivity_error(exc)


def test_sqlite_engines_enforce_foreign_keys():
    engine = get_engine("sqlite://")
    try:
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar_one() == 1
    finally:
        engine.dispose()
