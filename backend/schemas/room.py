from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class RoomRef(BaseModel):
    code: str
    description: str
    capacity: int | None = None
    status: str

    class Config:
        from_attributes = True


class RoomCreate(BaseModel):
    code: str
    description: str
    capacity: int | None = Field(default=None, gt=0)
    status: str = "FREE"


class RoomUpdate(BaseModel):
    description: str | None = None
    capacity: int | None = Field(default=None, gt=0)
    status: str | None = None


class RoomOut(RoomRef):
    created_at: datetime
