"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import httpx

from square_terminal.core.config import Settings
from square_terminal.infrastructure.persistence import build_store_repository
from square_terminal.infrastructure.square import SquareClient
from square_terminal.modules.oauth import OAuthService
from square_terminal.modules.payments import PaymentService
from square_terminal.modules.profiles import Profile, ProfileCreateInput, ProfileService, StoreRepository


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    # Routes every outbound HTTP call; tests plug in httpx.MockTransport.
    transport: Optional[httpx.AsyncBaseTransport] = None
    store_repository: Optional[StoreRepository] = None
    profiles: ProfileService = field(init=False)
    payments: PaymentService = field(init=False)
    oauth: OAuthService = field(init=False)

    def __post_init__(self) -> None:
        repository = self.store_repository or build_store_repository(self.settings.persistence, self.transport)
        self.store_repository = repository
        self.profiles = ProfileService(repository, seed=self.default_profile)
        self.payments = PaymentService(
            self.profiles,
            client_factory=self.profile_client,
            default_currency=self.settings.square.default_currency,
        )
        self.oauth = OAuthService(
            self.settings.oauth,
            self.settings.square_base_url,
            self.profiles,
            client_factory=self.square_client,
        )

    def default_profile(self) -> ProfileCreateInput:
        square = self.settings.square
        return ProfileCreateInput(
            name="Default",
            access_token=square.access_token,
            application_id=square.application_id,
            location_id=square.location_id,
        )

    def square_client(self, access_token: Optional[str] = None) -> SquareClient:
        square = self.settings.square
        return SquareClient(
            access_token,
            base_url=square.base_url,
            api_version=square.api_version,
            timeout=square.timeout,
            transport=self.transport,
        )

    def profile_client(self, profile: Profile) -> SquareClient:
        return self.square_client(profile.access_token)


__all__ = ["ApplicationContainer"]
