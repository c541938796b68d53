"""
Pytest configuration and fixtures.
"""
import httpx
import pytest
from fastapi.testclient import TestClient

from square_terminal.core.config import OAuthSettings, SecuritySettings, Settings, SquareSettings
from square_terminal.main import create_app
from square_terminal.modules.profiles import ProfileService

from .helpers import OPERATOR_PASSWORD, SEED_TOKEN, FakeSquare, MemoryStore, seed_input


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def profile_service(memory_store: MemoryStore) -> ProfileService:
    return ProfileService(memory_store, seed=seed_input)


@pytest.fixture
def fake_square() -> FakeSquare:
    return FakeSquare()


@pytest.fixture
def transport(fake_square: FakeSquare) -> httpx.MockTransport:
    return httpx.MockTransport(fake_square)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        _env_file=None,
        environment="test",
        log_level="DEBUG",
        security=SecuritySettings(
            secret_key="test-secret-key-for-sessions",
            operator_username="operator",
            operator_password=OPERATOR_PASSWORD,
        ),
        square=SquareSettings(
            environment="sandbox",
            access_token=SEED_TOKEN,
            application_id="sq0idp-seed",
            location_id="LSEED",
        ),
        oauth=OAuthSettings(
            client_id="sq0idp-oauth-app",
            client_secret="sq0csp-oauth-secret",
            redirect_uri="http://testserver/api/oauth/callback",
        ),
    )


@pytest.fixture
def client(test_settings: Settings, transport: httpx.MockTransport, memory_store: MemoryStore):
    app = create_app(test_settings, transport=transport, store_repository=memory_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def operator(client: TestClient) -> TestClient:
    """Client carrying a logged-in operator session cookie."""
    response = client.post("/api/auth/login", json={"username": "operator", "password": OPERATOR_PASSWORD})
    assert response.status_code == 200
    return client
