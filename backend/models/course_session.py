from __future__ import annotations

import enum

from sqlalchemy import CheckConstraint, Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from models.base import Base
from models.course import Course
from models.personnel import Personnel
from models.room import Room


class SessionStatus(str, enum.Enum):
    PENDING = "PENDING"
    VALIDATED = "VALIDATED"
    REJECTED = "REJECTED"


SESSION_STATUS = Enum(
    *[s.value for s in SessionStatus],
    name="session_status",
    native_enum=False,
    create_constraint=True,
    length=20,
)


class CourseSession(Base):
    """A scheduled course occurrence ("programmation") in one room and time window."""

    __tablename__ = "course_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    hours = Column(Integer, nullable=False)
    start = Column(DateTime(timezone=True), nullable=False)
    end = Column(DateTime(timezone=True), nullable=False)
    status = Column(SESSION_STATUS, nullable=False, default=SessionStatus.PENDING.value)

    course_code = Column(Text, ForeignKey("courses.code"), nullable=False, index=True)
    room_code = Column(Text, ForeignKey("rooms.code"), nullable=False, index=True)
    submitter_code = Column(String(20), ForeignKey("personnel.code"), nullable=False, index=True)
    validator_code = Column(String(20), ForeignKey("personnel.code"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    course = relationship(Course, lazy="joined")
    room = relationship(Room, lazy="joined")
    submitter = relationship(Personnel, foreign_keys=[submitter_code], lazy="joined")
    validator = relationship(Personnel, foreign_keys=[validator_code], lazy="joined")

    __table_args__ = (
        CheckConstraint('"end" > start', name="ck_course_sessions_time_range"),
        CheckConstraint("hours > 0", name="ck_course_sessions_hours"),
    )
