"""Password hashing and random token helpers."""

from __future__ import annotations

import hmac
import secrets

import bcrypt


def hash_password(password: str) -> str:
    """Hash the operator password using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against a stored bcrypt hash."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def constant_time_equals(left: str | None, right: str | None) -> bool:
    if not left or not right:
        return False
    return hmac.compare_digest(left.encode("utf-8"), right.encode("utf-8"))


def new_state_token(nbytes: int = 24) -> str:
    """Opaque value for the OAuth ``state`` parameter."""
    return secrets.token_urlsafe(nbytes)


__all__ = ["constant_time_equals", "hash_password", "new_state_token", "verify_password"]
