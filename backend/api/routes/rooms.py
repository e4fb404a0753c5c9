from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.deps import get_actor
from core.database import get_db
from schemas.room import RoomCreate, RoomOut, RoomUpdate
from services import room_service


router = APIRouter()


@router.get("/", response_model=list[RoomOut])
def list_rooms(
    status: str | None = Query(default=None),
    min_capacity: int | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[RoomOut]:
    return room_service.list_rooms(db, status=status, min_capacity=min_capacity)


@router.get("/count")
def count_rooms(db: Session = Depends(get_db)) -> dict:
    return {"count": room_service.count_rooms(db)}


@router.get("/{room_code}", response_model=RoomOut)
def get_room(room_code: str, db: Session = Depends(get_db)) -> RoomOut:
    return room_service.get_room(db, room_code)


@router.get("/{room_code}/exists")
def room_exists(room_code: str, db: Session = Depends(get_db)) -> dict:
    return {"exists": room_service.room_exists(db, room_code)}


@router.post("/", response_model=RoomOut, status_code=201)
def create_room(
    payload: RoomCreate,
    actor: str = Depends(get_actor),
    db: Session = Depends(get_db),
) -> RoomOut:
    return room_service.create_room(db, payload, actor=actor)


@router.patch("/{room_code}", response_model=RoomOut)
def update_room(
    room_code: str,
    payload: RoomUpdate,
    actor: str = Depends(get_actor),
    db: Session = Depends(get_db),
) -> RoomOut:
    return room_service.update_room(db, room_code, payload, actor=actor)


@router.delete("/{room_code}")
def delete_room(
    room_code: str,
    actor: str = Depends(get_actor),
    db: Session = Depends(get_db),
) -> dict:
    room_service.delete_room(db, room_code, actor=actor)
    return {"ok": True}
