"""Repository protocol for the serialized profile store."""

from __future__ import annotations

from typing import Protocol


class StoreRepository(Protocol):
    """Persists the whole store as one opaque string."""

    async def load(self) -> str | None:
        ...

    async def save(self, data: str) -> None:
        ...
