from __future__ import annotations

import importlib
import sys

from sqlalchemy import inspect

from core import bootstrap
from core.config import settings
from core.database import ENGINE
from services.personnel_service import authenticate


def test_seed_admin_is_skipped_without_credentials(monkeypatch):
    monkeypatch.setattr(settings, "seed_admin_login", None)
    assert bootstrap.seed_admin_if_configured() is None


def test_seed_admin_creates_once(db, monkeypatch):
    monkeypatch.setattr(settings, "seed_admin_login", "root")
    monkeypatch.setattr(settings, "seed_admin_password", "root-pw")

    assert bootstrap.seed_admin_if_configured() == "ADM0001"
    assert bootstrap.seed_admin_if_configured() is None

    personnel = authenticate(db, login="root", password="root-pw")
    assert personnel is not None
    assert personnel.role == "ADMINISTRATIVE"


def test_index_migration_is_repeatable(monkeypatch, capsys):
    migration = importlib.import_module("migrations.001_add_scheduling_indexes")

    monkeypatch.setattr(sys, "argv", ["001_add_scheduling_indexes"])
    migration.main()
    assert "Dry run" in capsys.readouterr().out

    monkeypatch.setattr(sys, "argv", ["001_add_scheduling_indexes", "--yes"])
    migration.main()
    migration.main()

    names = {ix["name"] for ix in inspect(ENGINE).get_indexes("rooms")}
    assert {"idx_rooms_status", "idx_rooms_capacity"} <= names
