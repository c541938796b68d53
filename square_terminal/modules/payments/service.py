"""Charges and payment links against the active profile."""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from typing import Any, Callable

from square_terminal.infrastructure.square import SquareApiError, SquareClient
from square_terminal.modules.profiles import Profile, ProfileNotFoundError, ProfileService, Transaction

from .exceptions import AmountLimitExceededError, PaymentProcessorError
from .models import ChargeInput, ChargeResult, PaymentLinkInput, PaymentLinkResult, parse_amount

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Profile], SquareClient]


def _compact(body: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in body.items() if value not in (None, "")}


def _check_limit(profile: Profile, amount: Decimal) -> None:
    if profile.exceeds_limit(amount):
        raise AmountLimitExceededError(
            f"Amount {amount} exceeds the {profile.max_amount} limit of profile {profile.name}"
        )


class PaymentService:
    def __init__(self, profiles: ProfileService, client_factory: ClientFactory, default_currency: str = "USD") -> None:
        self._profiles = profiles
        self._client_factory = client_factory
        self._default_currency = default_currency

    async def charge(self, payload: ChargeInput) -> ChargeResult:
        profile = await self._profiles.get_active()
        amount, amount_cents = parse_amount(payload.amount)
        _check_limit(profile, amount)
        currency = self._currency(payload.currency)

        body = _compact(
            {
                "source_id": payload.source_id,
                "idempotency_key": str(uuid.uuid4()),
                "amount_money": {"amount": amount_cents, "currency": currency},
                "location_id": profile.location_id,
                "note": payload.note,
                "buyer_email_address": payload.buyer_email,
                "verification_token": payload.verification_token,
            }
        )

        try:
            async with self._client_factory(profile) as client:
                payment = await client.create_payment(body)
        except SquareApiError as exc:
            transaction = await self._record_failure(profile, "charge", amount_cents, currency, payload.note, exc)
            raise PaymentProcessorError(exc.errors, transaction) from exc

        money = payment.get("amount_money") or {}
        transaction = Transaction(
            type="charge",
            amount_cents=int(money.get("amount", amount_cents)),
            currency=money.get("currency", currency),
            status=payment.get("status", "UNKNOWN"),
            payment_id=payment.get("id"),
            receipt_url=payment.get("receipt_url"),
            note=payload.note,
        )
        await self._record(profile, transaction)
        logger.info("Charge %s on profile %s: %s", transaction.payment_id, profile.name, transaction.status)
        return ChargeResult(
            payment_id=transaction.payment_id or "",
            status=transaction.status,
            amount_cents=transaction.amount_cents,
            currency=transaction.currency,
            receipt_url=transaction.receipt_url,
            transaction=transaction,
        )

    async def create_link(self, payload: PaymentLinkInput) -> PaymentLinkResult:
        profile = await self._profiles.get_active()
        amount, amount_cents = parse_amount(payload.amount)
        _check_limit(profile, amount)
        currency = self._currency(payload.currency)
        title = payload.title or "Payment"

        body = {
            "idempotency_key": str(uuid.uuid4()),
            "quick_pay": {
                "name": title,
                "price_money": {"amount": amount_cents, "currency": currency},
                "location_id": profile.location_id,
            },
            "description": payload.description or "",
        }

        try:
            async with self._client_factory(profile) as client:
                link = await client.create_payment_link(body)
        except SquareApiError as exc:
            transaction = await self._record_failure(profile, "link", amount_cents, currency, title, exc)
            raise PaymentProcessorError(exc.errors, transaction) from exc

        transaction = Transaction(
            type="link",
            amount_cents=amount_cents,
            currency=currency,
            status="CREATED",
            link_id=link.get("id"),
            url=link.get("url"),
            note=title,
        )
        await self._record(profile, transaction)
        logger.info("Payment link %s created on profile %s", transaction.link_id, profile.name)
        return PaymentLinkResult(url=transaction.url or "", link_id=transaction.link_id or "", transaction=transaction)

    async def _record(self, profile: Profile, transaction: Transaction) -> None:
        # Square has already accepted the request; a deleted profile only loses the log entry.
        try:
            await self._profiles.record_transaction(profile.id, transaction)
        except ProfileNotFoundError:
            logger.warning(
                "Profile %s was deleted before %s transaction %s could be recorded",
                profile.id,
                transaction.type,
                transaction.id,
            )

    def _currency(self, currency: str | None) -> str:
        return (currency or self._default_currency).upper()

    async def _record_failure(
        self,
        profile: Profile,
        kind: str,
        amount_cents: int,
        currency: str,
        note: str | None,
        exc: SquareApiError,
    ) -> Transaction:
        detail = "; ".join(str(e.get("detail") or e.get("code")) for e in exc.errors)
        transaction = Transaction(
            type=kind,
            amount_cents=amount_cents,
            currency=currency,
            status="FAILED",
            note=note,
            error=detail,
        )
        await self._record(profile, transaction)
        logger.warning("%s on profile %s failed: %s", kind.capitalize(), profile.name, detail)
        return transaction
