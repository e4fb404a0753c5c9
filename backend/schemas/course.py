from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class CourseRef(BaseModel):
    code: str
    label: str
    description: str | None = None
    credits: int
    hours: int

    class Config:
        from_attributes = True


class CourseCreate(BaseModel):
    code: str
    label: str
    description: str | None = None
    credits: int = Field(default=0, ge=0)
    hours: int = Field(default=0, ge=0)


class CoursePut(BaseModel):
    label: str
    description: str | None = None
    credits: int = Field(default=0, ge=0)
    hours: int = Field(default=0, ge=0)


class CourseOut(CourseRef):
    created_at: datetime
