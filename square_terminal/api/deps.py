"""Reusable FastAPI dependencies."""

from fastapi import Depends, Request

from square_terminal.core.config import Settings
from square_terminal.core.container import ApplicationContainer
from square_terminal.modules.oauth import OAuthService
from square_terminal.modules.payments import PaymentService
from square_terminal.modules.profiles import ProfileService


def get_container(request: Request) -> ApplicationContainer:
    return request.app.state.container


def get_app_settings(container: ApplicationContainer = Depends(get_container)) -> Settings:
    return container.settings


def get_profile_service(container: ApplicationContainer = Depends(get_container)) -> ProfileService:
    return container.profiles


def get_payment_service(container: ApplicationContainer = Depends(get_container)) -> PaymentService:
    return container.payments


def get_oauth_service(container: ApplicationContainer = Depends(get_container)) -> OAuthService:
    return container.oauth


__all__ = [
    "get_app_settings",
    "get_container",
    "get_oauth_service",
    "get_payment_service",
    "get_profile_service",
]
