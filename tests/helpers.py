"""Test doubles shared by the test modules."""
import json
from typing import Any, Optional

import httpx

from square_terminal.modules.profiles import ProfileCreateInput, StorePersistenceError

OPERATOR_PASSWORD = "correct-horse"
SEED_TOKEN = "EAAAseedtoken0001"


class MemoryStore:
    """Store backend kept in a plain attribute."""

    def __init__(self, data: Optional[str] = None) -> None:
        self.data = data
        self.saves = 0
        self.fail = False

    async def load(self) -> Optional[str]:
        return self.data

    async def save(self, data: str) -> None:
        if self.fail:
            raise StorePersistenceError("remote store unavailable")
        self.data = data
        self.saves += 1

    def document(self) -> dict[str, Any]:
        return json.loads(self.data)


class FakeSquare:
    """Answers Square REST calls from canned responses keyed by method and path."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], tuple[int, dict[str, Any]]] = {}

    def respond(self, method: str, path: str, status_code: int = 200, json: Optional[dict] = None) -> None:
        self.routes[(method, path)] = (status_code, json or {})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"errors": [{"code": "NOT_FOUND", "detail": f"no route for {key}"}]})
        status_code, body = self.routes[key]
        return httpx.Response(status_code, json=body)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def last_body(self, method: str, path: str) -> dict[str, Any]:
        return json.loads(self.calls(method, path)[-1].content)


def seed_input() -> ProfileCreateInput:
    return ProfileCreateInput(
        name="Default",
        access_token=SEED_TOKEN,
        application_id="sq0idp-seed",
        location_id="LSEED",
    )


