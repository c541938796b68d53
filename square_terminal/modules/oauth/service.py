"""Square OAuth authorization-code onboarding.

A merchant approves the application on Square, Square redirects back with a
``code``, and the code is traded for an access token. Two lookups follow: the
merchant record (for a display name) and its locations (to pick where charges
are booked). The outcome is stored as a regular profile.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional
from urllib.parse import urlencode

from square_terminal.core.config import OAuthSettings
from square_terminal.infrastructure.square import SquareApiError, SquareClient
from square_terminal.modules.profiles import (
    Profile,
    ProfileCreateInput,
    ProfileService,
    ProfileUpdateInput,
)

from .exceptions import OAuthExchangeError, OAuthNotConfiguredError
from .models import OAuthTokens, OnboardingResult

logger = logging.getLogger(__name__)

TokenClientFactory = Callable[[Optional[str]], SquareClient]


def pick_location(locations: list[dict[str, Any]], main_location_id: Optional[str] = None) -> dict[str, Any] | None:
    """Prefer the merchant's main location, then the first active one."""
    if not locations:
        return None
    if main_location_id:
        for location in locations:
            if location.get("id") == main_location_id:
                return location
    for location in locations:
        if location.get("status") == "ACTIVE":
            return location
    return locations[0]


class OAuthService:
    def __init__(
        self,
        settings: OAuthSettings,
        base_url: str,
        profiles: ProfileService,
        client_factory: TokenClientFactory,
    ) -> None:
        self._settings = settings
        self._base_url = base_url.rstrip("/")
        self._profiles = profiles
        self._client_factory = client_factory

    @property
    def enabled(self) -> bool:
        return self._settings.enabled

    def authorize_url(self, state: str) -> str:
        self._ensure_enabled()
        params = {
            "client_id": self._settings.client_id,
            "scope": " ".join(self._settings.scopes),
            "session": "false",
            "state": state,
        }
        if self._settings.redirect_uri:
            params["redirect_uri"] = self._settings.redirect_uri
        return f"{self._base_url}/oauth2/authorize?{urlencode(params)}"

    async def complete(self, code: str) -> OnboardingResult:
        self._ensure_enabled()
        if not code:
            raise OAuthExchangeError("Authorization code is missing")

        body = self._token_request(grant_type="authorization_code", code=code)
        if self._settings.redirect_uri:
            body["redirect_uri"] = self._settings.redirect_uri
        tokens = await self._obtain_token(body)

        try:
            async with self._client_factory(tokens.access_token) as client:
                merchant = await client.retrieve_merchant(tokens.merchant_id or "me")
                locations = await client.list_locations()
        except SquareApiError as exc:
            raise OAuthExchangeError(f"Merchant lookup failed: {exc}", exc.errors) from exc

        merchant_id = tokens.merchant_id or merchant.get("id") or ""
        location = pick_location(locations, merchant.get("main_location_id"))
        if location is None:
            raise OAuthExchangeError(f"Merchant {merchant_id} has no locations")

        name = merchant.get("business_name") or location.get("name") or f"Square {merchant_id}"
        existing = await self._profiles.find_by_merchant(merchant_id) if merchant_id else None
        if existing is not None:
            profile = await self._profiles.update(
                existing.id,
                ProfileUpdateInput(
                    name=name,
                    access_token=tokens.access_token,
                    application_id=self._settings.client_id,
                    location_id=location["id"],
                    refresh_token=tokens.refresh_token,
                    token_expires_at=tokens.expires_at,
                ),
            )
            profile = await self._profiles.activate(profile.id)
            logger.info("Re-authorized merchant %s on profile %s", merchant_id, profile.id)
            return OnboardingResult(profile=profile, created=False)

        profile = await self._profiles.create(
            ProfileCreateInput(
                name=name,
                access_token=tokens.access_token,
                application_id=self._settings.client_id,
                location_id=location["id"],
                merchant_id=merchant_id or None,
                refresh_token=tokens.refresh_token,
                token_expires_at=tokens.expires_at,
            ),
            activate=True,
        )
        logger.info("Onboarded merchant %s as profile %s", merchant_id, profile.id)
        return OnboardingResult(profile=profile, created=True)

    async def refresh(self, profile_id: str) -> Profile:
        self._ensure_enabled()
        profile = await self._profiles.get(profile_id)
        if not profile.refresh_token:
            raise OAuthExchangeError(f"Profile {profile.name} has no refresh token")

        tokens = await self._obtain_token(
            self._token_request(grant_type="refresh_token", refresh_token=profile.refresh_token)
        )
        logger.info("Refreshed access token for profile %s", profile.id)
        return await self._profiles.update(
            profile.id,
            ProfileUpdateInput(
                access_token=tokens.access_token,
                refresh_token=tokens.refresh_token or profile.refresh_token,
                token_expires_at=tokens.expires_at,
            ),
        )

    async def _obtain_token(self, body: dict[str, Any]) -> OAuthTokens:
        try:
            async with self._client_factory(None) as client:
                data = await client.obtain_token(body)
        except SquareApiError as exc:
            raise OAuthExchangeError(f"Token exchange failed: {exc}", exc.errors) from exc

        tokens = OAuthTokens.from_response(data)
        if not tokens.access_token:
            raise OAuthExchangeError("Token response did not include an access token")
        return tokens

    def _token_request(self, **fields: str) -> dict[str, Any]:
        return {
            "client_id": self._settings.client_id,
            "client_secret": self._settings.client_secret,
            **fields,
        }

    def _ensure_enabled(self) -> None:
        if not self.enabled:
            raise OAuthNotConfiguredError("Square OAuth is not configured")
