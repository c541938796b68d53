"""Profile store specific exceptions."""


class ProfileError(Exception):
    """Base class for profile store errors."""


class ProfileNotFoundError(ProfileError):
    """Raised when the requested profile cannot be found."""

    def __init__(self, profile_id: str) -> None:
        super().__init__(f"Profile not found: {profile_id}")
        self.profile_id = profile_id


class LastProfileError(ProfileError):
    """Raised when deleting the only remaining profile."""


class ProfileValidationError(ProfileError):
    """Raised when a create or update payload is missing required values."""


class StorePersistenceError(ProfileError):
    """Raised by a store backend when the serialized store cannot be written."""
