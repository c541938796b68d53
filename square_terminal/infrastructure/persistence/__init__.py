"""Profile store backends."""

from __future__ import annotations

from typing import Optional

import httpx

from square_terminal.core.config import PersistenceSettings
from square_terminal.modules.profiles.repository import StoreRepository

from .env_store import EnvStoreRepository
from .file_store import FileStoreRepository
from .render_store import RenderEnvStoreRepository


def build_store_repository(
    settings: PersistenceSettings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> StoreRepository:
    if settings.backend == "file":
        return FileStoreRepository(settings.file_path)
    if settings.backend == "render":
        return RenderEnvStoreRepository(
            api_key=settings.render_api_key,
            service_id=settings.render_service_id,
            env_var=settings.env_var,
            api_base=settings.render_api_base,
            timeout=settings.timeout,
            transport=transport,
        )
    return EnvStoreRepository(settings.env_var)


__all__ = [
    "EnvStoreRepository",
    "FileStoreRepository",
    "RenderEnvStoreRepository",
    "build_store_repository",
]
