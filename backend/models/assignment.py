from __future__ import annotations

from typing import NamedTuple

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from models.base import Base
from models.course import Course
from models.personnel import Personnel


class AssignmentKey(NamedTuple):
    """Composite identity of an assignment; hashes and compares by value."""

    course_code: str
    personnel_code: str


class Assignment(Base):
    __tablename__ = "assignments"

    course_code = Column(Text, ForeignKey("courses.code"), primary_key=True)
    personnel_code = Column(String(20), ForeignKey("personnel.code"), primary_key=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    course = relationship(Course, lazy="joined")
    personnel = relationship(Personnel, lazy="joined")

    @property
    def key(self) -> AssignmentKey:
        return AssignmentKey(self.course_code, self.personnel_code)
