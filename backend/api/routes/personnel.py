from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.deps import get_actor
from core.database import get_db
from schemas.personnel import PersonnelCreate, PersonnelOut, PersonnelPut
from services import personnel_service


router = APIRouter()


@router.get("/", response_model=list[PersonnelOut])
def list_personnel(
    role: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[PersonnelOut]:
    return personnel_service.list_personnel(db, role=role)


@router.get("/count")
def count_personnel(db: Session = Depends(get_db)) -> dict:
    return {"count": personnel_service.count_personnel(db)}


@router.get("/{personnel_code}", response_model=PersonnelOut)
def get_personnel(personnel_code: str, db: Session = Depends(get_db)) -> PersonnelOut:
    return personnel_service.get_personnel(db, personnel_code)


@router.get("/{personnel_code}/exists")
def personnel_exists(personnel_code: str, db: Session = Depends(get_db)) -> dict:
    return {"exists": personnel_service.personnel_exists(db, personnel_code)}


@router.post("/", response_model=PersonnelOut, status_code=201)
def create_personnel(
    payload: PersonnelCreate,
    actor: str = Depends(get_actor),
    db: Session = Depends(get_db),
) -> PersonnelOut:
    return personnel_service.create_personnel(db, payload, actor=actor)


@router.put("/{personnel_code}", response_model=PersonnelOut)
def put_personnel(
    personnel_code: str,
    payload: PersonnelPut,
    actor: str = Depends(get_actor),
    db: Session = Depends(get_db),
) -> PersonnelOut:
    return personnel_service.update_personnel(db, personnel_code, payload, actor=actor)


@router.delete("/{personnel_code}")
def delete_personnel(
    personnel_code: str,
    actor: str = Depends(get_actor),
    db: Session = Depends(get_db),
) -> dict:
    personnel_service.delete_personnel(db, personnel_code, actor=actor)
    return {"ok": True}
