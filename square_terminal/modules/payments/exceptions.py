"""Payment specific exceptions."""

from __future__ import annotations

from typing import Any, Optional

from square_terminal.modules.profiles.models import Transaction


class PaymentError(Exception):
    """Base class for payment errors."""


class InvalidAmountError(PaymentError):
    """Raised when the amount is missing, not a number or not positive."""


class AmountLimitExceededError(PaymentError):
    """Raised when a charge is above the active profile's ceiling."""


class PaymentProcessorError(PaymentError):
    """Raised when Square rejects the request or cannot be reached."""

    def __init__(self, errors: list[dict[str, Any]], transaction: Optional[Transaction] = None) -> None:
        super().__init__(errors[0].get("detail") if errors else "Payment processor error")
        self.errors = errors
        self.transaction = transaction
