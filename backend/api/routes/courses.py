from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.deps import get_actor
from core.database import get_db
from schemas.course import CourseCreate, CourseOut, CoursePut
from services import course_service


router = APIRouter()


@router.get("/", response_model=list[CourseOut])
def list_courses(
    label: str | None = Query(default=None),
    min_credits: int | None = Query(default=None, ge=0),
    min_hours: int | None = Query(default=None, ge=0),
    db: Session = Depends(get_db),
) -> list[CourseOut]:
    return course_service.list_courses(db, label=label, min_credits=min_credits, min_hours=min_hours)


@router.get("/count")
def count_courses(db: Session = Depends(get_db)) -> dict:
    return {"count": course_service.count_courses(db)}


@router.get("/{course_code}", response_model=CourseOut)
def get_course(course_code: str, db: Session = Depends(get_db)) -> CourseOut:
    return course_service.get_course(db, course_code)


@router.get("/{course_code}/exists")
def course_exists(course_code: str, db: Session = Depends(get_db)) -> dict:
    return {"exists": course_service.course_exists(db, course_code)}


@router.post("/", response_model=CourseOut, status_code=201)
def create_course(
    payload: CourseCreate,
    actor: str = Depends(get_actor),
    db: Session = Depends(get_db),
) -> CourseOut:
    return course_service.create_course(db, payload, actor=actor)


@router.put("/{course_code}", response_model=CourseOut)
def put_course(
    course_code: str,
    payload: CoursePut,
    actor: str = Depends(get_actor),
    db: Session = Depends(get_db),
) -> CourseOut:
    return course_service.update_course(db, course_code, payload, actor=actor)


@router.delete("/{course_code}")
def delete_course(
    course_code: str,
    actor: str = Depends(get_actor),
    db: Session = Depends(get_db),
) -> dict:
    course_service.delete_course(db, course_code, actor=actor)
    return {"ok": True}
