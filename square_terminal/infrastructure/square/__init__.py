"""Square REST adapter."""

from .client import SquareApiError, SquareClient

__all__ = ["SquareApiError", "SquareClient"]
