"""Tests for profile records, masking and the capped transaction log."""
from decimal import Decimal

from square_terminal.modules.profiles import MAX_TRANSACTIONS, Profile, ProfileStore, Transaction, mask_token


def _profile(**overrides) -> Profile:
    values = dict(name="Shop", access_token="EAAAabcdefgh1234", application_id="app", location_id="L1")
    values.update(overrides)
    return Profile(**values)


class TestMaskToken:
    def test_keeps_first_and_last_four(self) -> None:
        assert mask_token("EAAAabcdefgh1234") == "EAAA••••••••1234"

    def test_short_or_missing_tokens_are_fully_hidden(self) -> None:
        assert mask_token(None) == "••••••••"
        assert mask_token("") == "••••••••"
        assert mask_token("1234567") == "••••••••"

    def test_eight_characters_is_enough_to_show_edges(self) -> None:
        assert mask_token("abcdefgh") == "abcd••••••••efgh"

    def test_profile_exposes_masked_token(self) -> None:
        assert _profile().access_token_masked == "EAAA••••••••1234"


class TestTransactionLog:
    def test_most_recent_first(self) -> None:
        profile = _profile()
        first = Transaction(type="charge", amount_cents=100, currency="USD", status="COMPLETED")
        second = Transaction(type="link", amount_cents=200, currency="USD", status="CREATED")
        profile.add_transaction(first)
        profile.add_transaction(second)
        assert [tx.id for tx in profile.transactions] == [second.id, first.id]

    def test_capped_with_oldest_evicted(self) -> None:
        profile = _profile()
        created = []
        for cents in range(1, MAX_TRANSACTIONS + 6):
            tx = Transaction(type="charge", amount_cents=cents, currency="USD", status="COMPLETED")
            profile.add_transaction(tx)
            created.append(tx)

        assert len(profile.transactions) == MAX_TRANSACTIONS
        assert profile.transactions[0].id == created[-1].id
        assert profile.transactions[-1].id == created[5].id
        assert all(tx.amount_cents > 5 for tx in profile.transactions)


class TestLimits:
    def test_no_ceiling_allows_anything(self) -> None:
        assert not _profile().exceeds_limit(Decimal("1000000"))

    def test_ceiling_is_inclusive(self) -> None:
        profile = _profile(max_amount=Decimal("50.00"))
        assert not profile.exceeds_limit(Decimal("50.00"))
        assert profile.exceeds_limit(Decimal("50.01"))


class TestSerialization:
    def test_reads_legacy_camel_case_store(self) -> None:
        store = ProfileStore.from_dict(
            {
                "activeId": "p2",
                "profiles": [
                    {"id": "p1", "name": "One", "accessToken": "tok-1", "applicationId": "a1", "locationId": "l1"},
                    {
                        "id": "p2",
                        "name": "Two",
                        "accessToken": "tok-2",
                        "applicationId": "a2",
                        "locationId": "l2",
                        "maxAmount": 25,
                    },
                ],
            }
        )

        assert store.active_id == "p2"
        assert store.active().name == "Two"
        assert store.active().max_amount == Decimal("25")
        assert store.find("p1").access_token == "tok-1"
        assert store.find("p1").transactions == []

    def test_dict_form_preserves_secrets_and_history(self) -> None:
        profile = _profile(max_amount=Decimal("10.50"), refresh_token="refresh-1")
        profile.add_transaction(
            Transaction(type="charge", amount_cents=999, currency="EUR", status="FAILED", error="CARD_DECLINED")
        )
        restored = Profile.from_dict(profile.to_dict())

        assert restored.access_token == profile.access_token
        assert restored.refresh_token == "refresh-1"
        assert restored.max_amount == Decimal("10.50")
        assert restored.transactions[0].error == "CARD_DECLINED"
        assert restored.transactions[0].created_at == profile.transactions[0].created_at

    def test_active_falls_back_to_first_profile(self) -> None:
        store = ProfileStore(active_id="gone", profiles=[_profile(id="p1"), _profile(id="p2")])
        assert store.active().id == "p1"
