from models.assignment import Assignment, AssignmentKey
from models.course import Course
from models.course_session import CourseSession, SessionStatus
from models.personnel import Personnel, PersonnelRole
from models.room import Room, RoomStatus

__all__ = [
	"Assignment",
	"AssignmentKey",
	"Course",
	"CourseSession",
	"Personnel",
	"PersonnelRole",
	"Room",
	"RoomStatus",
	"SessionStatus",
]
