from __future__ import annotations

import enum

from sqlalchemy import Column, DateTime, Enum, String, Text
from sqlalchemy.sql import func

from models.base import Base


class PersonnelRole(str, enum.Enum):
    ADMINISTRATIVE = "ADMINISTRATIVE"
    INSTRUCTOR = "INSTRUCTOR"
    HEAD_OF_DEPARTMENT = "HEAD_OF_DEPARTMENT"


PERSONNEL_ROLE = Enum(
    *[r.value for r in PersonnelRole],
    name="personnel_role",
    native_enum=False,
    create_constraint=True,
    length=30,
)


class Personnel(Base):
    __tablename__ = "personnel"

    code = Column(String(20), primary_key=True)
    name = Column(Text, nullable=False)
    login = Column(String(100), nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    sex = Column(String(20), nullable=True)
    role = Column(PERSONNEL_ROLE, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
