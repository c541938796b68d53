"""Domain models for OAuth merchant onboarding."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from square_terminal.modules.profiles.models import Profile

from .exceptions import OAuthExchangeError


@dataclass(slots=True)
class OAuthTokens:
    access_token: str = field(repr=False)
    merchant_id: str
    refresh_token: Optional[str] = field(default=None, repr=False)
    expires_at: Optional[datetime] = None

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "OAuthTokens":
        return cls(
            access_token=data.get("access_token") or "",
            merchant_id=data.get("merchant_id") or "",
            refresh_token=data.get("refresh_token"),
            expires_at=_parse_expiry(data.get("expires_at")),
        )


def _parse_expiry(value: Any) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError as exc:
        raise OAuthExchangeError(f"Token response has an unreadable expires_at: {value!r}") from exc


@dataclass(slots=True)
class OnboardingResult:
    profile: Profile
    created: bool
