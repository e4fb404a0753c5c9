# backend/tests/conftest.py
"""
Shared fixtures.

Settings and the engine are built at import time, so the environment is
pinned here before any application module is imported: an in-memory SQLite
database, a throwaway JWT secret and cheap bcrypt rounds.
"""

from __future__ import annotations

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["AUTO_CREATE_SCHEMA"] = "false"
os.environ["ENVIRONMENT"] = "test"
os.environ.pop("SEED_ADMIN_LOGIN", None)
os.environ.pop("SEED_ADMIN_PASSWORD", None)

import pytest
from fastapi.testclient import TestClient

from api.routes import auth as auth_routes
from core.bootstrap import ensure_schema
from core.database import ENGINE, SessionLocal
from core.security import create_access_token
from main import app
from models import Personnel
from models.base import Base
from tests.factories import add_course, add_personnel, add_room


@pytest.fixture(autouse=True)
def _schema():
    ensure_schema(ENGINE)
    auth_routes._login_attempts.clear()
    yield
    Base.metadata.drop_all(bind=ENGINE)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def campus(db):
    """Room S001 (FREE), course C10, personnel P1 (submitter) and P2 (validator)."""

    add_room(db, "S001")
    add_course(db, "C10", label="Algorithms")
    add_personnel(db, "P1", name="Alice Martin")
    add_personnel(db, "P2", name="Bruno Kane", role="HEAD_OF_DEPARTMENT")
    return db


@pytest.fixture
def admin(db) -> Personnel:
    return add_personnel(db, "ADM0001", name="Admin", role="ADMINISTRATIVE", password="admin-pw")


@pytest.fixture
def auth_headers(admin) -> dict[str, str]:
    token = create_access_token(personnel_code=admin.code, login=admin.login, role=admin.role)
    return {"Authorization": f"Bearer {token}"}
