"""Operator session endpoints."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from square_terminal.api.deps import get_app_settings
from square_terminal.core.config import Settings
from square_terminal.core.security import authenticate_operator, create_session_token, current_session
from square_terminal.schemas import LoginRequest, SessionResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=SessionResponse, summary="Operator login")
async def login(
    payload: LoginRequest,
    response: Response,
    settings: Settings = Depends(get_app_settings),
) -> SessionResponse:
    security = settings.security
    if not security.auth_enabled:
        return SessionResponse(authenticated=True, auth_required=False, username=security.operator_username)

    if not authenticate_operator(payload.username, payload.password, security):
        logger.warning("Rejected login attempt for %s", payload.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")

    token = create_session_token(payload.username, security)
    response.set_cookie(
        security.session_cookie,
        token,
        max_age=security.session_expire_minutes * 60,
        httponly=True,
        secure=security.cookie_secure,
        samesite="lax",
    )
    logger.info("Operator %s logged in", payload.username)
    return SessionResponse(authenticated=True, auth_required=True, username=payload.username)


@router.post("/logout", response_model=SessionResponse, summary="End the operator session")
async def logout(response: Response, settings: Settings = Depends(get_app_settings)) -> SessionResponse:
    response.delete_cookie(settings.security.session_cookie)
    return SessionResponse(authenticated=False, auth_required=settings.security.auth_enabled)


@router.get("/session", response_model=SessionResponse, summary="Current session state")
async def session_state(request: Request, settings: Settings = Depends(get_app_settings)) -> SessionResponse:
    if not settings.security.auth_enabled:
        return SessionResponse(
            authenticated=True,
            auth_required=False,
            username=settings.security.operator_username,
        )
    session = current_session(request, settings)
    return SessionResponse(
        authenticated=session is not None,
        auth_required=True,
        username=session.username if session else None,
    )
