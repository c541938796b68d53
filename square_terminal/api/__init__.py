from fastapi import APIRouter

from square_terminal.api.routers import auth, oauth, payments, profiles


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(auth.router, prefix="/auth", tags=["auth"])
    router.include_router(profiles.router, tags=["profiles"])
    router.include_router(payments.router, tags=["payments"])
    router.include_router(oauth.router, prefix="/oauth", tags=["oauth"])
    return router


__all__ = [
    "create_api_router",
]
