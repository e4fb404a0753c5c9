from __future__ import annotations

from fastapi import APIRouter, Depends

from api.deps import get_current_personnel
from api.routes import assignments, auth, courses, personnel, rooms, sessions


api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])

# Every non-auth route requires an authenticated personnel.
_protected = [Depends(get_current_personnel)]
api_router.include_router(personnel.router, prefix="/personnel", tags=["personnel"], dependencies=_protected)
api_router.include_router(courses.router, prefix="/courses", tags=["courses"], dependencies=_protected)
api_router.include_router(rooms.router, prefix="/rooms", tags=["rooms"], dependencies=_protected)
api_router.include_router(sessions.router, prefix="/sessions", tags=["sessions"], dependencies=_protected)
api_router.include_router(assignments.router, prefix="/assignments", tags=["assignments"], dependencies=_protected)
