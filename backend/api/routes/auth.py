from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from api.deps import get_current_personnel
from core.config import settings
from core.database import get_db
from core.security import create_access_token
from models.personnel import Personnel
from schemas.auth import LoginRequest, LoginResponse, RegisterResponse
from schemas.personnel import PersonnelCreate, PersonnelOut
from services.personnel_service import authenticate, create_personnel


router = APIRouter()

logger = logging.getLogger(__name__)


# Simple in-memory rate limiting for login.
# NOTE: In multi-worker deployments this is per-worker.
_LOGIN_WINDOW_SECONDS = 60
_LOGIN_MAX_ATTEMPTS_PER_KEY = 12
_login_attempts: dict[str, list[float]] = {}


def _rate_limit_key(request: Request, login: str) -> str:
    ip = request.client.host if request.client else "unknown"
    return f"{ip}:{login.lower().strip()}"


def _enforce_login_rate_limit(request: Request, login: str) -> None:
    key = _rate_limit_key(request, login)
    now = time.time()
    history = [t for t in _login_attempts.get(key, []) if now - t < _LOGIN_WINDOW_SECONDS]
    history.append(now)
    _login_attempts[key] = history
    if len(history) > _LOGIN_MAX_ATTEMPTS_PER_KEY:
        raise HTTPException(status_code=429, detail="RATE_LIMITED")


def _issue_token(response: Response, personnel: Personnel) -> str:
    token = create_access_token(
        personnel_code=personnel.code,
        login=personnel.login,
        role=personnel.role,
    )
    response.set_cookie(
        key="access_token",
        value=token,
        httponly=True,
        secure=settings.environment.lower() == "production",
        samesite=settings.cookie_samesite,
        max_age=settings.access_token_expire_minutes * 60,
        path="/",
    )
    return token


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
) -> LoginResponse:
    login_name = payload.login.strip()
    _enforce_login_rate_limit(request, login_name)
    ip = request.client.host if request.client else "unknown"

    personnel = authenticate(db, login=login_name, password=payload.password)
    if personnel is None:
        logger.warning("Login failed ip=%s login=%r", ip, login_name)
        raise HTTPException(status_code=401, detail="INVALID_CREDENTIALS")

    token = _issue_token(response, personnel)
    logger.info("Login success ip=%s login=%r code=%s", ip, personnel.login, personnel.code)
    return LoginResponse(ok=True, access_token=token)


@router.post("/register", response_model=RegisterResponse)
def register(
    payload: PersonnelCreate,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
) -> RegisterResponse:
    is_production = settings.environment.lower() == "production"
    if is_production and not settings.allow_registration:
        raise HTTPException(status_code=403, detail="REGISTRATION_DISABLED")

    _enforce_login_rate_limit(request, payload.login or "")
    ip = request.client.host if request.client else "unknown"

    personnel = create_personnel(db, payload, actor=f"registration@{ip}")
    token = _issue_token(response, personnel)
    return RegisterResponse(
        ok=True,
        access_token=token,
        code=personnel.code,
        name=personnel.name,
        role=personnel.role,
    )


@router.post("/logout")
def logout(response: Response) -> dict[str, Any]:
    response.delete_cookie(key="access_token", path="/")
    return {"ok": True}


@router.get("/me", response_model=PersonnelOut)
def me(current: Personnel = Depends(get_current_personnel)) -> PersonnelOut:
    return current
