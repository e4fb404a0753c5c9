from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base class for errors raised by the service layer.

    Each subclass carries a stable machine ``code`` and the HTTP status the API
    layer reports it with. Domain errors propagate unwrapped to the caller.
    """

    status_code: int = 400
    code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, *, code: str | None = None, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            body["details"] = {k: str(v) for k, v in self.details.items()}
        return body


# --- NotFound (404) -------------------------------------------------------


class NotFoundError(DomainError):
    status_code = 404
    code = "NOT_FOUND"


class PersonnelNotFoundError(NotFoundError):
    code = "PERSONNEL_NOT_FOUND"

    def __init__(self, personnel_code: str, *, role: str | None = None) -> None:
        label = f"{role} personnel" if role else "Personnel"
        super().__init__(f"{label} not found: {personnel_code}", personnel_code=personnel_code)


class CourseNotFoundError(NotFoundError):
    code = "COURSE_NOT_FOUND"

    def __init__(self, course_code: str) -> None:
        super().__init__(f"Course not found: {course_code}", course_code=course_code)


class RoomNotFoundError(NotFoundError):
    code = "ROOM_NOT_FOUND"

    def __init__(self, room_code: str) -> None:
        super().__init__(f"Room not found: {room_code}", room_code=room_code)


class SessionNotFoundError(NotFoundError):
    code = "SESSION_NOT_FOUND"

    def __init__(self, session_id: int) -> None:
        super().__init__(f"Session not found: {session_id}", session_id=session_id)


class AssignmentNotFoundError(NotFoundError):
    code = "ASSIGNMENT_NOT_FOUND"

    def __init__(self, course_code: str, personnel_code: str) -> None:
        super().__init__(
            f"Assignment not found for course {course_code} and personnel {personnel_code}",
            course_code=course_code,
            personnel_code=personnel_code,
        )


# --- Validation (400) -----------------------------------------------------


class ValidationError(DomainError):
    status_code = 400
    code = "VALIDATION_ERROR"


class MissingFieldError(ValidationError):
    code = "MISSING_FIELD"

    def __init__(self, name: str) -> None:
        super().__init__(f"Field is required: {name}", field=name)
        self.field = name


class InvalidTimeRangeError(ValidationError):
    code = "INVALID_TIME_RANGE"


class InvalidStatusError(ValidationError):
    code = "INVALID_STATUS"

    def __init__(self, value: Any, *, field: str = "status") -> None:
        super().__init__(f"Invalid value for {field}: {value!r}", field=field, value=value)


# --- Conflict (409) -------------------------------------------------------


class ConflictError(DomainError):
    status_code = 409
    code = "CONFLICT"


class RoomUnavailableError(ConflictError):
    code = "ROOM_UNAVAILABLE"

    def __init__(self, room_code: str, status: str) -> None:
        super().__init__(f"Room {room_code} is currently {status}", room_code=room_code, status=status)
        self.status = status


class DuplicateAssignmentError(ConflictError):
    code = "DUPLICATE_ASSIGNMENT"

    def __init__(self, course_code: str, personnel_code: str) -> None:
        super().__init__(
            f"Personnel {personnel_code} is already assigned to course {course_code}",
            course_code=course_code,
            personnel_code=personnel_code,
        )


class EntityInUseError(ConflictError):
    code = "ENTITY_IN_USE"


# --- Internal (500) -------------------------------------------------------


class InternalError(DomainError):
    """Unexpected storage failure, wrapped with the operation context."""

    status_code = 500
    code = "INTERNAL_ERROR"
