from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from schemas.course import CourseRef
from schemas.personnel import PersonnelSummary


class AssignmentCreate(BaseModel):
    course_code: str | None = None
    personnel_code: str | None = None


class AssignmentOut(BaseModel):
    personnel_code: str
    course_code: str
    personnel: PersonnelSummary
    course: CourseRef
    created_at: datetime

    class Config:
        from_attributes = True
