"""Store backend that keeps the serialized store in a process environment variable."""

from __future__ import annotations

import os


class EnvStoreRepository:
    def __init__(self, env_var: str = "PROFILES_DATA") -> None:
        self.env_var = env_var

    async def load(self) -> str | None:
        return os.environ.get(self.env_var) or None

    async def save(self, data: str) -> None:
        os.environ[self.env_var] = data
