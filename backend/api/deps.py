from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from core.database import get_db
from core.security import decode_token
from models.personnel import Personnel


bearer_scheme = HTTPBearer(auto_error=False)


def _extract_token(request: Request, creds: HTTPAuthorizationCredentials | None) -> str | None:
    if creds is not None and creds.credentials:
        return creds.credentials
    cookie_token = request.cookies.get("access_token")
    return cookie_token or None


def get_current_personnel(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Personnel:
    cached = getattr(request.state, "current_personnel", None)
    if isinstance(cached, Personnel):
        return cached

    token = _extract_token(request, creds)
    if not token:
        raise HTTPException(status_code=401, detail="NOT_AUTHENTICATED")
    try:
        payload = decode_token(token)
    except JWTError:
        raise HTTPException(status_code=401, detail="INVALID_TOKEN")

    code = payload.get("sub")
    if not code:
        raise HTTPException(status_code=401, detail="INVALID_TOKEN")

    personnel = db.get(Personnel, str(code))
    if personnel is None:
        raise HTTPException(status_code=401, detail="INVALID_TOKEN")

    request.state.current_personnel = personnel
    request.state.auth_payload = payload
    return personnel


def get_actor(
    request: Request,
    current: Personnel = Depends(get_current_personnel),
) -> str:
    """Opaque actor string used for log attribution by the services."""

    ip = request.client.host if request.client else "unknown"
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    return f"{current.login}@{ip}"
