from __future__ import annotations

from core.errors import InvalidTimeRangeError, MissingFieldError
from schemas.course_session import SessionRequest


def validate_session_request(payload: SessionRequest) -> None:
    if payload.start is None or payload.end is None:
        raise InvalidTimeRangeError("Start and end timestamps are required")
    if (payload.start.tzinfo is None) != (payload.end.tzinfo is None):
        raise InvalidTimeRangeError("Start and end timestamps must both carry a UTC offset or neither")
    if payload.end <= payload.start:
        raise InvalidTimeRangeError(
            "End timestamp must be strictly after start timestamp",
            start=payload.start,
            end=payload.end,
        )
    if not (payload.room_code or "").strip():
        raise MissingFieldError("room_code")
    if not (payload.course_code or "").strip():
        raise MissingFieldError("course_code")
