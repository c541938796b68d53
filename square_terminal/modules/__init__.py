"""Feature modules and their public exports."""

from . import oauth, payments, profiles

__all__ = [
    "oauth",
    "payments",
    "profiles",
]
