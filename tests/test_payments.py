"""Tests for charges and payment links."""
import json
from decimal import Decimal

import httpx
import pytest

from square_terminal.infrastructure.square import SquareClient
from square_terminal.modules.payments import (
    AmountLimitExceededError,
    ChargeInput,
    InvalidAmountError,
    PaymentLinkInput,
    PaymentProcessorError,
    PaymentService,
    parse_amount,
)
from square_terminal.modules.profiles import Profile, ProfileCreateInput, ProfileService, ProfileUpdateInput

from .helpers import SEED_TOKEN, FakeSquare

BASE_URL = "https://connect.squareupsandbox.com"


@pytest.fixture
def payment_service(profile_service: ProfileService, fake_square: FakeSquare) -> PaymentService:
    transport = httpx.MockTransport(fake_square)

    def client_factory(profile: Profile) -> SquareClient:
        return SquareClient(profile.access_token, base_url=BASE_URL, api_version="2024-01-18", transport=transport)

    return PaymentService(profile_service, client_factory=client_factory, default_currency="usd")


class TestParseAmount:
    @pytest.mark.parametrize(
        "value, expected_cents",
        [
            ("12.50", 1250),
            (12.5, 1250),
            ("0.005", 1),
            ("19.999", 2000),
            (" 7 ", 700),
            (3, 300),
        ],
    )
    def test_rounds_to_cents(self, value, expected_cents) -> None:
        assert parse_amount(value)[1] == expected_cents

    def test_returns_quantized_decimal(self) -> None:
        assert parse_amount("10.1") == (Decimal("10.10"), 1010)

    @pytest.mark.parametrize("value", [None, "", "abc", "NaN", "Infinity", "0", "-5", "0.004"])
    def test_rejects_invalid_amounts(self, value) -> None:
        with pytest.raises(InvalidAmountError):
            parse_amount(value)


class TestCharge:
    @pytest.mark.asyncio
    async def test_successful_charge_is_recorded(
        self, payment_service: PaymentService, profile_service: ProfileService, fake_square: FakeSquare
    ) -> None:
        fake_square.respond(
            "POST",
            "/v2/payments",
            json={
                "payment": {
                    "id": "pay-123",
                    "status": "COMPLETED",
                    "amount_money": {"amount": 1250, "currency": "USD"},
                    "receipt_url": "https://squareup.com/receipt/preview/pay-123",
                }
            },
        )

        result = await payment_service.charge(ChargeInput(source_id="cnon:card-nonce-ok", amount="12.50", note="Table 4"))

        assert result.payment_id == "pay-123"
        assert result.status == "COMPLETED"
        assert result.amount_cents == 1250
        assert result.receipt_url.endswith("pay-123")

        request = fake_square.calls("POST", "/v2/payments")[0]
        assert request.headers["Authorization"] == f"Bearer {SEED_TOKEN}"
        assert request.headers["Square-Version"] == "2024-01-18"
        body = fake_square.last_body("POST", "/v2/payments")
        assert body["source_id"] == "cnon:card-nonce-ok"
        assert body["amount_money"] == {"amount": 1250, "currency": "USD"}
        assert body["location_id"] == "LSEED"
        assert body["note"] == "Table 4"
        assert body["idempotency_key"]
        assert "buyer_email_address" not in body
        assert "verification_token" not in body

        profile = await profile_service.get_active()
        [tx] = await profile_service.list_transactions(profile.id)
        assert (tx.type, tx.status, tx.payment_id, tx.amount_cents) == ("charge", "COMPLETED", "pay-123", 1250)

    @pytest.mark.asyncio
    async def test_each_charge_gets_a_fresh_idempotency_key(
        self, payment_service: PaymentService, fake_square: FakeSquare
    ) -> None:
        fake_square.respond("POST", "/v2/payments", json={"payment": {"id": "p", "status": "COMPLETED"}})

        await payment_service.charge(ChargeInput(source_id="nonce", amount=1))
        await payment_service.charge(ChargeInput(source_id="nonce", amount=1))

        keys = {json.loads(req.content)["idempotency_key"] for req in fake_square.calls("POST", "/v2/payments")}
        assert len(keys) == 2

    @pytest.mark.asyncio
    async def test_ceiling_blocks_charge_before_calling_square(
        self, payment_service: PaymentService, profile_service: ProfileService, fake_square: FakeSquare
    ) -> None:
        profile = await profile_service.get_active()
        await profile_service.update(profile.id, ProfileUpdateInput(max_amount=Decimal("50")))

        with pytest.raises(AmountLimitExceededError):
            await payment_service.charge(ChargeInput(source_id="nonce", amount="50.01"))

        assert fake_square.requests == []
        assert await profile_service.list_transactions(profile.id) == []

    @pytest.mark.asyncio
    async def test_invalid_amount_never_reaches_square(
        self, payment_service: PaymentService, fake_square: FakeSquare
    ) -> None:
        with pytest.raises(InvalidAmountError):
            await payment_service.charge(ChargeInput(source_id="nonce", amount="-1"))
        assert fake_square.requests == []

    @pytest.mark.asyncio
    async def test_declined_charge_records_failure(
        self, payment_service: PaymentService, profile_service: ProfileService, fake_square: FakeSquare
    ) -> None:
        errors = [{"category": "PAYMENT_METHOD_ERROR", "code": "CARD_DECLINED", "detail": "Card declined."}]
        fake_square.respond("POST", "/v2/payments", status_code=402, json={"errors": errors})

        with pytest.raises(PaymentProcessorError) as excinfo:
            await payment_service.charge(ChargeInput(source_id="nonce", amount="5", currency="eur"))

        assert excinfo.value.errors == errors
        profile = await profile_service.get_active()
        [tx] = await profile_service.list_transactions(profile.id)
        assert tx.status == "FAILED"
        assert tx.currency == "EUR"
        assert tx.error == "Card declined."
        assert excinfo.value.transaction.id == tx.id

    @pytest.mark.asyncio
    async def test_unreachable_square_is_a_processor_error(self, profile_service: ProfileService) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        service = PaymentService(
            profile_service,
            client_factory=lambda profile: SquareClient(
                profile.access_token,
                base_url=BASE_URL,
                api_version="2024-01-18",
                transport=httpx.MockTransport(handler),
            ),
        )

        with pytest.raises(PaymentProcessorError, match="unreachable"):
            await service.charge(ChargeInput(source_id="nonce", amount="5"))


class TestPaymentLinks:
    @pytest.mark.asyncio
    async def test_link_uses_default_title(
        self, payment_service: PaymentService, profile_service: ProfileService, fake_square: FakeSquare
    ) -> None:
        fake_square.respond(
            "POST",
            "/v2/online-checkout/payment-links",
            json={"payment_link": {"id": "link-1", "url": "https://square.link/u/abc"}},
        )

        result = await payment_service.create_link(PaymentLinkInput(amount="20"))

        assert result.url == "https://square.link/u/abc"
        assert result.link_id == "link-1"
        body = fake_square.last_body("POST", "/v2/online-checkout/payment-links")
        assert body["quick_pay"] == {
            "name": "Payment",
            "price_money": {"amount": 2000, "currency": "USD"},
            "location_id": "LSEED",
        }
        assert body["description"] == ""

        profile = await profile_service.get_active()
        [tx] = await profile_service.list_transactions(profile.id)
        assert (tx.type, tx.status, tx.link_id, tx.url) == ("link", "CREATED", "link-1", "https://square.link/u/abc")

    @pytest.mark.asyncio
    async def test_link_with_title_and_description(
        self, payment_service: PaymentService, fake_square: FakeSquare
    ) -> None:
        fake_square.respond(
            "POST",
            "/v2/online-checkout/payment-links",
            json={"payment_link": {"id": "link-2", "url": "https://square.link/u/def"}},
        )

        await payment_service.create_link(PaymentLinkInput(amount=9.99, title="Deposit", description="Order 77"))

        body = fake_square.last_body("POST", "/v2/online-checkout/payment-links")
        assert body["quick_pay"]["name"] == "Deposit"
        assert body["quick_pay"]["price_money"]["amount"] == 999
        assert body["description"] == "Order 77"

    @pytest.mark.asyncio
    async def test_rejected_link_records_failure(
        self, payment_service: PaymentService, profile_service: ProfileService, fake_square: FakeSquare
    ) -> None:
        fake_square.respond(
            "POST",
            "/v2/online-checkout/payment-links",
            status_code=401,
            json={"errors": [{"category": "AUTHENTICATION_ERROR", "code": "UNAUTHORIZED", "detail": "Bad token"}]},
        )

        with pytest.raises(PaymentProcessorError):
            await payment_service.create_link(PaymentLinkInput(amount="1"))

        profile = await profile_service.get_active()
        [tx] = await profile_service.list_transactions(profile.id)
        assert (tx.type, tx.status, tx.error) == ("link", "FAILED", "Bad token")

    @pytest.mark.asyncio
    async def test_ceiling_blocks_link_before_calling_square(
        self, payment_service: PaymentService, profile_service: ProfileService, fake_square: FakeSquare
    ) -> None:
        profile = await profile_service.get_active()
        await profile_service.update(profile.id, ProfileUpdateInput(max_amount=Decimal("10")))

        with pytest.raises(AmountLimitExceededError):
            await payment_service.create_link(PaymentLinkInput(amount="5000"))

        assert fake_square.requests == []
        assert await profile_service.list_transactions(profile.id) == []


class TestProfileDeletedMidRequest:
    @staticmethod
    def _service(profile_service: ProfileService, handler) -> PaymentService:
        return PaymentService(
            profile_service,
            client_factory=lambda profile: SquareClient(
                profile.access_token,
                base_url=BASE_URL,
                api_version="2024-01-18",
                transport=httpx.MockTransport(handler),
            ),
        )

    @staticmethod
    async def _second_active_profile(profile_service: ProfileService) -> Profile:
        return await profile_service.create(
            ProfileCreateInput(name="Pop-up", access_token="EAAApopuptoken01", application_id="app-2", location_id="L2"),
            activate=True,
        )

    @pytest.mark.asyncio
    async def test_completed_charge_is_still_returned(self, profile_service: ProfileService) -> None:
        seeded = await profile_service.get_active()
        doomed = await self._second_active_profile(profile_service)

        async def handler(request: httpx.Request) -> httpx.Response:
            await profile_service.delete(doomed.id)
            return httpx.Response(
                200,
                json={
                    "payment": {
                        "id": "pay-late",
                        "status": "COMPLETED",
                        "amount_money": {"amount": 800, "currency": "USD"},
                    }
                },
            )

        result = await self._service(profile_service, handler).charge(ChargeInput(source_id="nonce", amount="8"))

        assert result.payment_id == "pay-late"
        assert result.status == "COMPLETED"
        assert result.amount_cents == 800
        assert await profile_service.list_transactions(seeded.id) == []

    @pytest.mark.asyncio
    async def test_declined_charge_still_raises_processor_error(self, profile_service: ProfileService) -> None:
        doomed = await self._second_active_profile(profile_service)

        async def handler(request: httpx.Request) -> httpx.Response:
            await profile_service.delete(doomed.id)
            return httpx.Response(402, json={"errors": [{"code": "CARD_DECLINED", "detail": "Card declined."}]})

        with pytest.raises(PaymentProcessorError, match="Card declined"):
            await self._service(profile_service, handler).charge(ChargeInput(source_id="nonce", amount="8"))
