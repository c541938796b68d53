"""Use cases for the multi-profile credential store."""

from __future__ import annotations

import json
import logging
from typing import Callable

from .exceptions import (
    LastProfileError,
    ProfileNotFoundError,
    ProfileValidationError,
    StorePersistenceError,
)
from .models import (
    UNSET,
    Profile,
    ProfileCreateInput,
    ProfileStore,
    ProfileSummary,
    ProfileUpdateInput,
    Transaction,
    utcnow,
)
from .repository import StoreRepository

logger = logging.getLogger(__name__)


class ProfileService:
    """Keeps the store in memory and writes the whole of it on every change."""

    def __init__(self, repository: StoreRepository, seed: Callable[[], ProfileCreateInput]) -> None:
        self._repository = repository
        self._seed = seed
        self._store: ProfileStore | None = None
        self.persisted = True

    async def load(self) -> ProfileStore:
        if self._store is not None:
            return self._store

        store = self._decode(await self._repository.load())
        if store is None or not store.profiles:
            profile = self._build(self._seed())
            profile.name = profile.name or "Default"
            store = ProfileStore(active_id=profile.id, profiles=[profile])
            self._store = store
            logger.info("Seeded profile store with default profile %s", profile.id)
            await self._persist()
            return store

        if store.find(store.active_id) is None:
            logger.warning("Active profile %s missing from store, falling back to first", store.active_id)
            store.active_id = store.profiles[0].id
        self._store = store
        return store

    async def list_profiles(self) -> tuple[str, list[ProfileSummary]]:
        store = await self.load()
        summaries = [
            ProfileSummary(
                id=profile.id,
                name=profile.name,
                application_id=profile.application_id,
                location_id=profile.location_id,
                access_token_masked=profile.access_token_masked,
                active=profile.id == store.active_id,
                max_amount=profile.max_amount,
                merchant_id=profile.merchant_id,
                token_expires_at=profile.token_expires_at,
                transaction_count=len(profile.transactions),
            )
            for profile in store.profiles
        ]
        return store.active_id, summaries

    async def get_active(self) -> Profile:
        store = await self.load()
        return store.active()

    async def get(self, profile_id: str) -> Profile:
        store = await self.load()
        profile = store.find(profile_id)
        if profile is None:
            raise ProfileNotFoundError(profile_id)
        return profile

    async def find_by_merchant(self, merchant_id: str) -> Profile | None:
        store = await self.load()
        return next((p for p in store.profiles if p.merchant_id and p.merchant_id == merchant_id), None)

    async def activate(self, profile_id: str) -> Profile:
        store = await self.load()
        profile = await self.get(profile_id)
        store.active_id = profile.id
        logger.info("Activated profile %s (%s)", profile.id, profile.name)
        await self._persist()
        return profile

    async def create(self, payload: ProfileCreateInput, *, activate: bool = False) -> Profile:
        _require(name=payload.name, application_id=payload.application_id, location_id=payload.location_id)
        if not payload.access_token:
            raise ProfileValidationError("accessToken is required for new profile")
        _check_max_amount(payload.max_amount)

        store = await self.load()
        profile = self._build(payload)
        store.profiles.append(profile)
        if activate:
            store.active_id = profile.id
        logger.info("Created profile %s (%s)", profile.id, profile.name)
        await self._persist()
        return profile

    async def update(self, profile_id: str, payload: ProfileUpdateInput) -> Profile:
        profile = await self.get(profile_id)

        name = profile.name if payload.name is UNSET else payload.name
        application_id = profile.application_id if payload.application_id is UNSET else payload.application_id
        location_id = profile.location_id if payload.location_id is UNSET else payload.location_id
        _require(name=name, application_id=application_id, location_id=location_id)

        if payload.max_amount is not UNSET:
            _check_max_amount(payload.max_amount)
            profile.max_amount = payload.max_amount
        # An empty token in an edit form means "keep the current one".
        if payload.access_token is not UNSET and payload.access_token:
            profile.access_token = payload.access_token
        if payload.merchant_id is not UNSET:
            profile.merchant_id = payload.merchant_id
        if payload.refresh_token is not UNSET:
            profile.refresh_token = payload.refresh_token
        if payload.token_expires_at is not UNSET:
            profile.token_expires_at = payload.token_expires_at

        profile.name = name
        profile.application_id = application_id
        profile.location_id = location_id
        profile.updated_at = utcnow()
        logger.info("Updated profile %s (%s)", profile.id, profile.name)
        await self._persist()
        return profile

    async def delete(self, profile_id: str) -> None:
        store = await self.load()
        if len(store.profiles) <= 1:
            raise LastProfileError("Cannot delete the last profile")
        profile = await self.get(profile_id)

        store.profiles = [p for p in store.profiles if p.id != profile.id]
        if store.active_id == profile.id:
            store.active_id = store.profiles[0].id
            logger.info("Deleted active profile, %s is now active", store.active_id)
        logger.info("Deleted profile %s (%s)", profile.id, profile.name)
        await self._persist()

    async def record_transaction(self, profile_id: str, transaction: Transaction) -> Transaction:
        profile = await self.get(profile_id)
        profile.add_transaction(transaction)
        await self._persist()
        return transaction

    async def list_transactions(self, profile_id: str) -> list[Transaction]:
        profile = await self.get(profile_id)
        return list(profile.transactions)

    async def clear_transactions(self, profile_id: str) -> int:
        profile = await self.get(profile_id)
        removed = len(profile.transactions)
        profile.transactions.clear()
        await self._persist()
        return removed

    def dumps(self) -> str:
        if self._store is None:
            raise RuntimeError("Profile store has not been loaded")
        return json.dumps(self._store.to_dict(), separators=(",", ":"))

    async def _persist(self) -> bool:
        try:
            await self._repository.save(self.dumps())
        except StorePersistenceError as exc:
            logger.warning("Profile store changed in memory but was not persisted: %s", exc)
            self.persisted = False
        else:
            self.persisted = True
        return self.persisted

    @staticmethod
    def _decode(raw: str | None) -> ProfileStore | None:
        if not raw:
            return None
        try:
            return ProfileStore.from_dict(json.loads(raw))
        except (ValueError, TypeError, AttributeError, ArithmeticError) as exc:
            logger.error("Persisted profile store is unreadable, reseeding: %s", exc)
            return None

    @staticmethod
    def _build(payload: ProfileCreateInput) -> Profile:
        return Profile(
            name=payload.name,
            access_token=payload.access_token,
            application_id=payload.application_id,
            location_id=payload.location_id,
            max_amount=payload.max_amount,
            merchant_id=payload.merchant_id,
            refresh_token=payload.refresh_token,
            token_expires_at=payload.token_expires_at,
        )


def _require(**fields: object) -> None:
    if not all(fields.values()):
        raise ProfileValidationError("name, applicationId and locationId are required")


def _check_max_amount(value: object) -> None:
    if value is not None and value <= 0:
        raise ProfileValidationError("maxAmount must be greater than zero")
