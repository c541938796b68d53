"""Store backend that mirrors the process environment variable to Render.

The running process reads the store from its own environment at boot. Each
save updates that variable in place and PUTs the same value to the service's
environment through the Render API so the next deploy starts from it.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import httpx

from square_terminal.modules.profiles.exceptions import StorePersistenceError

logger = logging.getLogger(__name__)


class RenderEnvStoreRepository:
    def __init__(
        self,
        *,
        api_key: str,
        service_id: str,
        env_var: str = "PROFILES_DATA",
        api_base: str = "https://api.render.com/v1",
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not api_key or not service_id:
            raise ValueError("Render persistence needs both an API key and a service id")
        self.env_var = env_var
        self._api_key = api_key
        self._service_id = service_id
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self._api_base}/services/{self._service_id}/env-vars/{self.env_var}"

    async def load(self) -> str | None:
        return os.environ.get(self.env_var) or None

    async def save(self, data: str) -> None:
        os.environ[self.env_var] = data
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.put(self.endpoint, json={"value": data}, headers=headers)
        except httpx.HTTPError as exc:
            raise StorePersistenceError(f"Render API unreachable: {exc}") from exc

        if response.is_error:
            raise StorePersistenceError(
                f"Render API rejected env var update: {response.status_code} {response.text[:200]}"
            )
        logger.debug("Pushed %s (%d bytes) to Render service %s", self.env_var, len(data), self._service_id)
