"""Application configuration using pydantic settings with structured sections."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


SQUARE_HOSTS = {
    "production": "https://connect.squareup.com",
    "sandbox": "https://connect.squareupsandbox.com",
}


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000
    reload: bool = False


class SecuritySettings(BaseModel):
    secret_key: str = Field(default="change-me", min_length=8)
    algorithm: str = "HS256"
    session_expire_minutes: int = 60 * 12
    session_cookie: str = "session"
    cookie_secure: bool = False
    operator_username: str = "admin"
    # Either a bcrypt hash (preferred) or a plain password for local use.
    operator_password_hash: str = ""
    operator_password: str = ""

    @property
    def auth_enabled(self) -> bool:
        return bool(self.operator_password_hash or self.operator_password)


class SquareSettings(BaseModel):
    environment: Literal["production", "sandbox"] = "production"
    access_token: str = ""
    application_id: str = ""
    location_id: str = ""
    api_version: str = "2024-01-18"
    timeout: float = 30.0
    default_currency: str = "USD"

    @property
    def base_url(self) -> str:
        return SQUARE_HOSTS[self.environment]


class OAuthSettings(BaseModel):
    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""
    scopes: list[str] = Field(
        default_factory=lambda: [
            "MERCHANT_PROFILE_READ",
            "PAYMENTS_READ",
            "PAYMENTS_WRITE",
            "ORDERS_READ",
            "ORDERS_WRITE",
        ]
    )
    state_cookie: str = "oauth_state"
    state_ttl_seconds: int = 600

    @property
    def enabled(self) -> bool:
        return bool(self.client_id and self.client_secret)


class PersistenceSettings(BaseModel):
    backend: Literal["env", "file", "render"] = "env"
    env_var: str = "PROFILES_DATA"
    file_path: Path = Path("profiles.json")
    render_api_key: str = ""
    render_service_id: str = ""
    render_api_base: str = "https://api.render.com/v1"
    timeout: float = 15.0


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"
    project_name: str = "Square Terminal"
    api_prefix: str = "/api"

    server: ServerSettings = ServerSettings()
    security: SecuritySettings = SecuritySettings()
    square: SquareSettings = SquareSettings()
    oauth: OAuthSettings = OAuthSettings()
    persistence: PersistenceSettings = PersistenceSettings()

    static_dir: Path = Path("square_terminal/web/static")

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def square_base_url(self) -> str:
        return self.square.base_url


@lru_cache()
def get_settings() -> Settings:
    return Settings()
