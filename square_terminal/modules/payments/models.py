"""Domain models for charges and payment links."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from square_terminal.modules.profiles.models import Transaction

from .exceptions import InvalidAmountError

CENT = Decimal("0.01")


def parse_amount(value: object) -> tuple[Decimal, int]:
    """Return the amount rounded to cents and the same amount in minor units."""
    if value is None or value == "":
        raise InvalidAmountError("amount is required")
    try:
        amount = Decimal(str(value).strip()).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise InvalidAmountError(f"amount is not a number: {value!r}") from exc
    if not amount.is_finite():
        raise InvalidAmountError(f"amount is not a number: {value!r}")
    cents = int(amount * 100)
    if cents <= 0:
        raise InvalidAmountError("amount must be greater than zero")
    return amount, cents


@dataclass(slots=True)
class ChargeInput:
    source_id: str
    amount: object
    currency: Optional[str] = None
    note: Optional[str] = None
    buyer_email: Optional[str] = None
    verification_token: Optional[str] = None


@dataclass(slots=True)
class PaymentLinkInput:
    amount: object
    currency: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None


@dataclass(slots=True)
class ChargeResult:
    payment_id: str
    status: str
    amount_cents: int
    currency: str
    receipt_url: Optional[str]
    transaction: Transaction


@dataclass(slots=True)
class PaymentLinkResult:
    url: str
    link_id: str
    transaction: Transaction
