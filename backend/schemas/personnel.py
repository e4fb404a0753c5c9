from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class PersonnelRef(BaseModel):
    code: str
    name: str

    class Config:
        from_attributes = True


class PersonnelSummary(PersonnelRef):
    role: str


class PersonnelCreate(BaseModel):
    name: str
    login: str = Field(max_length=100)
    password: str = Field(max_length=256)
    sex: str | None = Field(default=None, max_length=20)
    role: str


class PersonnelPut(BaseModel):
    name: str
    login: str = Field(max_length=100)
    sex: str | None = Field(default=None, max_length=20)
    role: str
    # Only re-hashed when supplied and non-blank.
    password: str | None = Field(default=None, max_length=256)


class PersonnelOut(PersonnelSummary):
    login: str
    sex: str | None = None
    created_at: datetime
