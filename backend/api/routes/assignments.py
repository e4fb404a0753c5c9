from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.deps import get_actor
from core.database import get_db
from schemas.assignment import AssignmentCreate, AssignmentOut
from services import assignment_registry


router = APIRouter()


@router.get("/", response_model=list[AssignmentOut])
def list_assignments(db: Session = Depends(get_db)) -> list[AssignmentOut]:
    return assignment_registry.list_assignments(db)


@router.get("/{course_code}/{personnel_code}", response_model=AssignmentOut)
def get_assignment(course_code: str, personnel_code: str, db: Session = Depends(get_db)) -> AssignmentOut:
    return assignment_registry.get_assignment(db, course_code, personnel_code)


@router.post("/", response_model=AssignmentOut, status_code=201)
def create_assignment(
    payload: AssignmentCreate,
    actor: str = Depends(get_actor),
    db: Session = Depends(get_db),
) -> AssignmentOut:
    return assignment_registry.create_assignment(db, payload.course_code, payload.personnel_code, actor=actor)


@router.delete("/{course_code}/{personnel_code}")
def delete_assignment(
    course_code: str,
    personnel_code: str,
    actor: str = Depends(get_actor),
    db: Session = Depends(get_db),
) -> dict:
    assignment_registry.delete_assignment(db, course_code, personnel_code, actor=actor)
    return {"ok": True}
