"""Thin async client for the Square REST endpoints used by the terminal."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


class SquareApiError(Exception):
    """Raised for non-2xx Square responses and transport failures.

    ``errors`` mirrors Square's error objects (``category``, ``code``,
    ``detail``, ``field``) so they can be handed to the caller unchanged.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        errors: Optional[list[dict[str, Any]]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or [{"detail": message}]


class SquareClient:
    def __init__(
        self,
        access_token: Optional[str] = None,
        *,
        base_url: str,
        api_version: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        headers = {
            "Square-Version": api_version,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "SquareClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def create_payment(self, body: dict[str, Any]) -> dict[str, Any]:
        data = await self._request("POST", "/v2/payments", json=body)
        return data.get("payment") or {}

    async def create_payment_link(self, body: dict[str, Any]) -> dict[str, Any]:
        data = await self._request("POST", "/v2/online-checkout/payment-links", json=body)
        return data.get("payment_link") or {}

    async def retrieve_merchant(self, merchant_id: str) -> dict[str, Any]:
        data = await self._request("GET", f"/v2/merchants/{merchant_id}")
        return data.get("merchant") or {}

    async def list_locations(self) -> list[dict[str, Any]]:
        data = await self._request("GET", "/v2/locations")
        return data.get("locations") or []

    async def obtain_token(self, body: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/oauth2/token", json=body)

    async def _request(self, method: str, path: str, json: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        try:
            response = await self._http.request(method, path, json=json)
        except httpx.HTTPError as exc:
            logger.error("Square %s %s failed: %s", method, path, exc)
            raise SquareApiError(f"Square API unreachable: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_error:
            errors = _extract_errors(data, response)
            logger.warning(
                "Square %s %s returned %s: %s",
                method,
                path,
                response.status_code,
                "; ".join(str(e.get("code") or e.get("detail")) for e in errors),
            )
            raise SquareApiError(errors[0].get("detail") or "Square request failed", status_code=response.status_code, errors=errors)
        return data


def _extract_errors(data: Any, response: httpx.Response) -> list[dict[str, Any]]:
    if isinstance(data, dict):
        if isinstance(data.get("errors"), list) and data["errors"]:
            return data["errors"]
        # The OAuth endpoints answer with a flat {"message", "type"} object.
        if data.get("message"):
            return [{"code": data.get("type"), "detail": data["message"]}]
    return [{"detail": f"HTTP {response.status_code}"}]


__all__ = ["SquareApiError", "SquareClient"]
