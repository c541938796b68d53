"""OAuth onboarding exceptions."""

from __future__ import annotations

from typing import Any, Optional


class OAuthError(Exception):
    """Base class for OAuth onboarding errors."""


class OAuthNotConfiguredError(OAuthError):
    """Raised when the application id or secret is not configured."""


class OAuthStateError(OAuthError):
    """Raised when the callback state is missing or does not match."""


class OAuthExchangeError(OAuthError):
    """Raised when Square rejects the token exchange or a follow-up lookup."""

    def __init__(self, message: str, errors: Optional[list[dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.errors = errors or [{"detail": message}]
