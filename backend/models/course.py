from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Text
from sqlalchemy.sql import func

from models.base import Base


class Course(Base):
    __tablename__ = "courses"

    code = Column(Text, primary_key=True)
    label = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    credits = Column(Integer, nullable=False, default=0)
    hours = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("credits >= 0", name="ck_courses_credits"),
        CheckConstraint("hours >= 0", name="ck_courses_hours"),
    )
