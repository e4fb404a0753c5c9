from __future__ import annotations

import threading

import pytest
from sqlalchemy import func, select

from core.database import SessionLocal
from core.errors import (
    AssignmentNotFoundError,
    CourseNotFoundError,
    DuplicateAssignmentError,
    EntityInUseError,
    MissingFieldError,
    PersonnelNotFoundError,
)
from core.locks import assignment_locks
from models import Assignment, AssignmentKey
from services import assignment_registry, personnel_service


ACTOR = "tester@127.0.0.1"


def _count(db) -> int:
    return int(db.execute(select(func.count()).select_from(Assignment)).scalar_one())


def test_create_links_personnel_and_course(campus):
    assignment = assignment_registry.create_assignment(campus, "C10", "P1", actor=ACTOR)
    assert assignment.key == AssignmentKey("C10", "P1")
    assert assignment.personnel.name == "Alice Martin"
    assert assignment.course.label == "Algorithms"


def test_duplicate_pair_is_rejected_and_single_record_kept(campus):
    assignment_registry.create_assignment(campus, "C10", "P1", actor=ACTOR)
    with pytest.raises(DuplicateAssignmentError) as excinfo:
        assignment_registry.create_assignment(campus, "C10", "P1", actor=ACTOR)
    assert excinfo.value.status_code == 409
    assert _count(campus) == 1
    assert assignment_locks.active_keys() == 0


def test_same_course_may_have_several_personnel(campus):
    assignment_registry.create_assignment(campus, "C10", "P1", actor=ACTOR)
    assignment_registry.create_assignment(campus, "C10", "P2", actor=ACTOR)
    keys = [a.key for a in assignment_registry.list_assignments(campus)]
    assert keys == [AssignmentKey("C10", "P1"), AssignmentKey("C10", "P2")]


def test_key_parts_are_trimmed_before_duplicate_check(campus):
    assignment_registry.create_assignment(campus, "C10", "P1", actor=ACTOR)
    with pytest.raises(DuplicateAssignmentError):
        assignment_registry.create_assignment(campus, " C10 ", "P1 ", actor=ACTOR)


def test_personnel_is_resolved_before_course(campus):
    with pytest.raises(PersonnelNotFoundError):
        assignment_registry.create_assignment(campus, "C99", "P404", actor=ACTOR)


def test_unknown_course_is_not_found(campus):
    with pytest.raises(CourseNotFoundError):
        assignment_registry.create_assignment(campus, "C99", "P1", actor=ACTOR)
    assert _count(campus) == 0


@pytest.mark.parametrize(
    ("course_code", "personnel_code", "field"),
    [("C10", None, "personnel_code"), ("C10", "  ", "personnel_code"), ("", "P1", "course_code"), (None, None, "personnel_code")],
)
def test_blank_key_parts_are_missing_fields(campus, course_code, personnel_code, field):
    with pytest.raises(MissingFieldError) as excinfo:
        assignment_registry.create_assignment(campus, course_code, personnel_code, actor=ACTOR)
    assert excinfo.value.field == field


def test_get_and_delete(campus):
    assignment_registry.create_assignment(campus, "C10", "P1", actor=ACTOR)
    assert assignment_registry.get_assignment(campus, "C10", "P1").personnel_code == "P1"

    assignment_registry.delete_assignment(campus, "C10", "P1", actor=ACTOR)
    with pytest.raises(AssignmentNotFoundError):
        assignment_registry.get_assignment(campus, "C10", "P1")


def test_delete_absent_pair_is_not_found(campus):
    with pytest.raises(AssignmentNotFoundError):
        assignment_registry.delete_assignment(campus, "C10", "P1", actor=ACTOR)


def test_personnel_delete_waits_for_assignment_that_references_it(campus, monkeypatch):
    resolved = threading.Event()
    proceed = threading.Event()
    real_get_personnel = assignment_registry.get_personnel

    def get_personnel_then_pause(db, code, **kwargs):
        personnel = real_get_personnel(db, code, **kwargs)
        resolved.set()
        proceed.wait(5)
        return personnel

    monkeypatch.setattr(assignment_registry, "get_personnel", get_personnel_then_pause)
    outcome = {}

    def assign():
        db = SessionLocal()
        try:
            outcome["key"] = assignment_registry.create_assignment(db, "C10", "P1", actor=ACTOR).key
        finally:
            db.close()

    def remove_personnel():
        db = SessionLocal()
        try:
            personnel_service.delete_personnel(db, "P1", actor=ACTOR)
            outcome["deleted"] = True
        except EntityInUseError as exc:
            outcome["refused"] = exc.code
        finally:
            db.close()

    assigning = threading.Thread(target=assign)
    assigning.start()
    assert resolved.wait(5)

    deleting = threading.Thread(target=remove_personnel)
    deleting.start()
    deleting.join(0.2)
    assert deleting.is_alive()

    proceed.set()
    assigning.join(5)
    deleting.join(5)

    assert outcome.get("key") == AssignmentKey("C10", "P1")
    assert outcome.get("refused") == "PERSONNEL_IN_USE"
    assert "deleted" not in outcome
    assert _count(campus) == 1
