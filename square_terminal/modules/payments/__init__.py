"""Charges and payment links."""

from .exceptions import (
    AmountLimitExceededError,
    InvalidAmountError,
    PaymentError,
    PaymentProcessorError,
)
from .models import ChargeInput, ChargeResult, PaymentLinkInput, PaymentLinkResult, parse_amount
from .service import ClientFactory, PaymentService

__all__ = [
    "AmountLimitExceededError",
    "ChargeInput",
    "ChargeResult",
    "ClientFactory",
    "InvalidAmountError",
    "PaymentError",
    "PaymentLinkInput",
    "PaymentLinkResult",
    "PaymentProcessorError",
    "PaymentService",
    "parse_amount",
]
