from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.deps import get_actor
from core.database import get_db
from schemas.course_session import SessionOut, SessionRequest
from services import scheduler


router = APIRouter()


@router.get("/", response_model=list[SessionOut])
def list_sessions(db: Session = Depends(get_db)) -> list[SessionOut]:
    return scheduler.list_sessions(db)


@router.get("/{session_id}", response_model=SessionOut)
def get_session(session_id: int, db: Session = Depends(get_db)) -> SessionOut:
    return scheduler.get_session(db, session_id)


@router.post("/", response_model=SessionOut, status_code=201)
def create_session(
    payload: SessionRequest,
    actor: str = Depends(get_actor),
    db: Session = Depends(get_db),
) -> SessionOut:
    return scheduler.create_session(db, payload, actor=actor)


@router.put("/{session_id}", response_model=SessionOut)
def update_session(
    session_id: int,
    payload: SessionRequest,
    actor: str = Depends(get_actor),
    db: Session = Depends(get_db),
) -> SessionOut:
    return scheduler.update_session(db, session_id, payload, actor=actor)


@router.delete("/{session_id}")
def delete_session(
    session_id: int,
    actor: str = Depends(get_actor),
    db: Session = Depends(get_db),
) -> dict:
    scheduler.delete_session(db, session_id, actor=actor)
    return {"ok": True}


@router.delete("/")
def delete_all_sessions(
    actor: str = Depends(get_actor),
    db: Session = Depends(get_db),
) -> dict:
    return {"ok": True, "deleted": scheduler.delete_all_sessions(db, actor=actor)}
