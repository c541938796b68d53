"""Merchant profile store."""

from .exceptions import (
    LastProfileError,
    ProfileError,
    ProfileNotFoundError,
    ProfileValidationError,
    StorePersistenceError,
)
from .models import (
    MAX_TRANSACTIONS,
    UNSET,
    Profile,
    ProfileCreateInput,
    ProfileStore,
    ProfileSummary,
    ProfileUpdateInput,
    Transaction,
    mask_token,
)
from .repository import StoreRepository
from .service import ProfileService

__all__ = [
    "LastProfileError",
    "MAX_TRANSACTIONS",
    "Profile",
    "ProfileCreateInput",
    "ProfileError",
    "ProfileNotFoundError",
    "ProfileService",
    "ProfileStore",
    "ProfileSummary",
    "ProfileUpdateInput",
    "ProfileValidationError",
    "StorePersistenceError",
    "StoreRepository",
    "Transaction",
    "UNSET",
    "mask_token",
]
