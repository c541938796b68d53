"""Square OAuth onboarding: redirect to Square and handle the callback."""
import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from square_terminal.api.deps import get_app_settings, get_oauth_service
from square_terminal.core.config import Settings
from square_terminal.core.crypto import constant_time_equals, new_state_token
from square_terminal.core.security import create_state_token, decode_state_token, require_operator
from square_terminal.modules.oauth import OAuthError, OAuthService, OAuthStateError

router = APIRouter(dependencies=[Depends(require_operator)])
logger = logging.getLogger(__name__)


def _back_to_app(settings: Settings, **params: str) -> RedirectResponse:
    response = RedirectResponse(f"/?{urlencode(params)}", status_code=status.HTTP_302_FOUND)
    response.delete_cookie(settings.oauth.state_cookie)
    return response


@router.get("/authorize", summary="Start merchant onboarding on Square")
async def authorize(
    oauth: OAuthService = Depends(get_oauth_service),
    settings: Settings = Depends(get_app_settings),
) -> RedirectResponse:
    if not oauth.enabled:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Square OAuth is not configured")

    state = new_state_token()
    response = RedirectResponse(oauth.authorize_url(state), status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        settings.oauth.state_cookie,
        create_state_token(state, settings.security, settings.oauth.state_ttl_seconds),
        max_age=settings.oauth.state_ttl_seconds,
        httponly=True,
        secure=settings.security.cookie_secure,
        samesite="lax",
    )
    return response


@router.get("/callback", summary="Square redirects here after the merchant decides")
async def callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    error_description: Optional[str] = None,
    oauth: OAuthService = Depends(get_oauth_service),
    settings: Settings = Depends(get_app_settings),
) -> RedirectResponse:
    if not oauth.enabled:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Square OAuth is not configured")

    if error:
        logger.warning("Square OAuth returned %s: %s", error, error_description)
        return _back_to_app(settings, oauth="error", message=error_description or error)

    try:
        expected = decode_state_token(request.cookies.get(settings.oauth.state_cookie), settings.security)
        if not constant_time_equals(state, expected):
            raise OAuthStateError("OAuth state mismatch")
        result = await oauth.complete(code or "")
    except OAuthError as exc:
        logger.warning("OAuth onboarding failed: %s", exc)
        return _back_to_app(settings, oauth="error", message=str(exc))

    return _back_to_app(
        settings,
        oauth="success",
        profile=result.profile.id,
        created="1" if result.created else "0",
    )
