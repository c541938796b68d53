"""Domain models for merchant profiles and their transaction logs."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

MAX_TRANSACTIONS = 50
MASK = "••••••••"


def generate_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def mask_token(token: Optional[str]) -> str:
    """Hide all but the first and last four characters of a secret."""
    if not token or len(token) < 8:
        return MASK
    return token[:4] + MASK + token[-4:]


def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    # Stores written by the previous service use camelCase keys.
    for key in keys:
        if key in data:
            return data[key]
    return default


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(slots=True)
class Transaction:
    type: str
    amount_cents: int
    currency: str
    status: str
    id: str = field(default_factory=generate_id)
    created_at: datetime = field(default_factory=utcnow)
    payment_id: Optional[str] = None
    link_id: Optional[str] = None
    url: Optional[str] = None
    receipt_url: Optional[str] = None
    note: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "amount_cents": self.amount_cents,
            "currency": self.currency,
            "status": self.status,
            "created_at": _format_datetime(self.created_at),
            "payment_id": self.payment_id,
            "link_id": self.link_id,
            "url": self.url,
            "receipt_url": self.receipt_url,
            "note": self.note,
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transaction":
        return cls(
            id=_pick(data, "id") or generate_id(),
            type=_pick(data, "type", default="charge"),
            amount_cents=int(_pick(data, "amount_cents", "amountCents", default=0)),
            currency=_pick(data, "currency", default="USD"),
            status=_pick(data, "status", default="UNKNOWN"),
            created_at=_parse_datetime(_pick(data, "created_at", "createdAt")) or utcnow(),
            payment_id=_pick(data, "payment_id", "paymentId"),
            link_id=_pick(data, "link_id", "linkId"),
            url=_pick(data, "url"),
            receipt_url=_pick(data, "receipt_url", "receiptUrl"),
            note=_pick(data, "note"),
            error=_pick(data, "error"),
        )


@dataclass(slots=True)
class Profile:
    name: str
    access_token: str = field(repr=False)
    application_id: str
    location_id: str
    id: str = field(default_factory=generate_id)
    max_amount: Optional[Decimal] = None
    merchant_id: Optional[str] = None
    refresh_token: Optional[str] = field(default=None, repr=False)
    token_expires_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None
    transactions: list[Transaction] = field(default_factory=list)

    @property
    def access_token_masked(self) -> str:
        return mask_token(self.access_token)

    def add_transaction(self, transaction: Transaction) -> None:
        """Prepend a transaction, evicting the oldest beyond the cap."""
        self.transactions.insert(0, transaction)
        del self.transactions[MAX_TRANSACTIONS:]

    def exceeds_limit(self, amount: Decimal) -> bool:
        return self.max_amount is not None and amount > self.max_amount

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "access_token": self.access_token,
            "application_id": self.application_id,
            "location_id": self.location_id,
            "max_amount": str(self.max_amount) if self.max_amount is not None else None,
            "merchant_id": self.merchant_id,
            "refresh_token": self.refresh_token,
            "token_expires_at": _format_datetime(self.token_expires_at),
            "created_at": _format_datetime(self.created_at),
            "updated_at": _format_datetime(self.updated_at),
            "transactions": [tx.to_dict() for tx in self.transactions],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Profile":
        max_amount = _pick(data, "max_amount", "maxAmount")
        transactions = [Transaction.from_dict(item) for item in _pick(data, "transactions", default=[]) or []]
        return cls(
            id=_pick(data, "id") or generate_id(),
            name=_pick(data, "name", default=""),
            access_token=_pick(data, "access_token", "accessToken", default="") or "",
            application_id=_pick(data, "application_id", "applicationId", default="") or "",
            location_id=_pick(data, "location_id", "locationId", default="") or "",
            max_amount=Decimal(str(max_amount)) if max_amount not in (None, "") else None,
            merchant_id=_pick(data, "merchant_id", "merchantId"),
            refresh_token=_pick(data, "refresh_token", "refreshToken"),
            token_expires_at=_parse_datetime(_pick(data, "token_expires_at", "tokenExpiresAt")),
            created_at=_parse_datetime(_pick(data, "created_at", "createdAt")) or utcnow(),
            updated_at=_parse_datetime(_pick(data, "updated_at", "updatedAt")),
            transactions=transactions[:MAX_TRANSACTIONS],
        )


@dataclass(slots=True)
class ProfileStore:
    active_id: str
    profiles: list[Profile]

    def find(self, profile_id: str) -> Profile | None:
        return next((p for p in self.profiles if p.id == profile_id), None)

    def active(self) -> Profile:
        return self.find(self.active_id) or self.profiles[0]

    def to_dict(self) -> dict[str, Any]:
        return {
            "active_id": self.active_id,
            "profiles": [profile.to_dict() for profile in self.profiles],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProfileStore":
        profiles = [Profile.from_dict(item) for item in _pick(data, "profiles", default=[]) or []]
        return cls(active_id=_pick(data, "active_id", "activeId", default="") or "", profiles=profiles)


@dataclass(slots=True)
class ProfileSummary:
    id: str
    name: str
    application_id: str
    location_id: str
    access_token_masked: str
    active: bool
    max_amount: Optional[Decimal]
    merchant_id: Optional[str]
    token_expires_at: Optional[datetime]
    transaction_count: int


@dataclass(slots=True)
class ProfileCreateInput:
    name: str
    access_token: str
    application_id: str
    location_id: str
    max_amount: Optional[Decimal] = None
    merchant_id: Optional[str] = None
    refresh_token: Optional[str] = None
    token_expires_at: Optional[datetime] = None


# Sentinel used to differentiate between "not provided" and explicit None.
UNSET = object()


@dataclass(slots=True)
class ProfileUpdateInput:
    name: str | object = UNSET
    application_id: str | object = UNSET
    location_id: str | object = UNSET
    access_token: Optional[str] | object = UNSET
    max_amount: Optional[Decimal] | object = UNSET
    merchant_id: Optional[str] | object = UNSET
    refresh_token: Optional[str] | object = UNSET
    token_expires_at: Optional[datetime] | object = UNSET
