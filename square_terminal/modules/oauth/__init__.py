"""Square OAuth merchant onboarding."""

from .exceptions import OAuthError, OAuthExchangeError, OAuthNotConfiguredError, OAuthStateError
from .models import OAuthTokens, OnboardingResult
from .service import OAuthService, TokenClientFactory, pick_location

__all__ = [
    "OAuthError",
    "OAuthExchangeError",
    "OAuthNotConfiguredError",
    "OAuthService",
    "OAuthStateError",
    "OAuthTokens",
    "OnboardingResult",
    "TokenClientFactory",
    "pick_location",
]
