"""Operator login, session cookie and OAuth state helpers."""
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt

from square_terminal.core.config import SecuritySettings, Settings
from square_terminal.core.crypto import constant_time_equals, verify_password
from square_terminal.schemas import SessionData

SESSION_KIND = "session"
STATE_KIND = "oauth_state"


def authenticate_operator(username: str, password: str, settings: SecuritySettings) -> bool:
    if not constant_time_equals(username, settings.operator_username):
        return False
    if settings.operator_password_hash:
        return verify_password(password, settings.operator_password_hash)
    return constant_time_equals(password, settings.operator_password)


def _encode(claims: dict, settings: SecuritySettings, expires_delta: timedelta) -> str:
    payload = {**claims, "exp": datetime.now(timezone.utc) + expires_delta}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def _decode(token: str, settings: SecuritySettings, kind: str) -> dict | None:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    if payload.get("kind") != kind:
        return None
    return payload


def create_session_token(username: str, settings: SecuritySettings, expires_delta: Optional[timedelta] = None) -> str:
    expire_delta = expires_delta or timedelta(minutes=settings.session_expire_minutes)
    return _encode({"sub": username, "kind": SESSION_KIND}, settings, expire_delta)


def decode_session_token(token: str, settings: SecuritySettings) -> SessionData | None:
    payload = _decode(token, settings, SESSION_KIND)
    if payload is None or not payload.get("sub"):
        return None
    return SessionData(username=payload["sub"])


def create_state_token(state: str, settings: SecuritySettings, ttl_seconds: int) -> str:
    return _encode({"state": state, "kind": STATE_KIND}, settings, timedelta(seconds=ttl_seconds))


def decode_state_token(token: str | None, settings: SecuritySettings) -> str | None:
    if not token:
        return None
    payload = _decode(token, settings, STATE_KIND)
    return payload.get("state") if payload else None


def current_session(request: Request, settings: Settings) -> SessionData | None:
    token = request.cookies.get(settings.security.session_cookie)
    if not token:
        return None
    return decode_session_token(token, settings.security)


def request_settings(request: Request) -> Settings:
    return request.app.state.container.settings


async def require_operator(request: Request, settings: Settings = Depends(request_settings)) -> SessionData:
    if not settings.security.auth_enabled:
        return SessionData(username=settings.security.operator_username)
    session = current_session(request, settings)
    if session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return session
