from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from schemas.course import CourseRef
from schemas.personnel import PersonnelRef
from schemas.room import RoomRef


class SessionRequest(BaseModel):
    """Create/update payload for a scheduled session.

    Fields are optional at the schema level so the scheduler can report
    missing values with its own domain errors.
    """

    room_code: str | None = None
    course_code: str | None = None
    submitter_code: str | None = None
    validator_code: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    hours: int | None = Field(default=None, ge=1)
    # Only consulted on update; new sessions always start PENDING.
    status: str | None = None


class SessionOut(BaseModel):
    id: int
    hours: int
    start: datetime
    end: datetime
    status: str
    course: CourseRef
    room: RoomRef
    submitter: PersonnelRef
    validator: PersonnelRef
    created_at: datetime

    class Config:
        from_attributes = True
