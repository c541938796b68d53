"""Profile management and per-profile transaction history."""
from fastapi import APIRouter, Depends, HTTPException, status

from square_terminal.api.deps import get_app_settings, get_oauth_service, get_profile_service
from square_terminal.core.config import Settings
from square_terminal.core.security import require_operator
from square_terminal.modules.oauth import OAuthExchangeError, OAuthNotConfiguredError, OAuthService
from square_terminal.modules.profiles import (
    LastProfileError,
    ProfileCreateInput,
    ProfileNotFoundError,
    ProfileService,
    ProfileUpdateInput,
    ProfileValidationError,
)
from square_terminal.schemas import (
    ActivateResponse,
    ClearTransactionsResponse,
    ConfigResponse,
    ProfileListResponse,
    ProfileResponse,
    ProfileSaveResponse,
    ProfileUpsertRequest,
    SuccessResponse,
    TransactionListResponse,
    TransactionResponse,
)

router = APIRouter(dependencies=[Depends(require_operator)])

UPDATABLE_FIELDS = ("name", "access_token", "application_id", "location_id", "max_amount")


def _not_found(exc: ProfileNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")


@router.get("/config", response_model=ConfigResponse, summary="Client configuration for the active profile")
async def client_config(
    profiles: ProfileService = Depends(get_profile_service),
    settings: Settings = Depends(get_app_settings),
) -> ConfigResponse:
    profile = await profiles.get_active()
    return ConfigResponse(
        application_id=profile.application_id,
        location_id=profile.location_id,
        environment=settings.square.environment,
        profile_id=profile.id,
        profile_name=profile.name,
        max_amount=profile.max_amount,
        oauth_enabled=settings.oauth.enabled,
    )


@router.get("/profiles", response_model=ProfileListResponse, summary="List profiles with masked tokens")
async def list_profiles(profiles: ProfileService = Depends(get_profile_service)) -> ProfileListResponse:
    active_id, summaries = await profiles.list_profiles()
    return ProfileListResponse(
        active_id=active_id,
        profiles=[ProfileResponse.model_validate(summary) for summary in summaries],
    )


@router.post("/profiles", response_model=ProfileSaveResponse, summary="Create a profile, or update one when id is set")
async def save_profile(
    payload: ProfileUpsertRequest,
    profiles: ProfileService = Depends(get_profile_service),
) -> ProfileSaveResponse:
    try:
        if payload.id:
            changes = {name: getattr(payload, name) for name in UPDATABLE_FIELDS if name in payload.model_fields_set}
            profile = await profiles.update(payload.id, ProfileUpdateInput(**changes))
        else:
            profile = await profiles.create(
                ProfileCreateInput(
                    name=payload.name or "",
                    access_token=payload.access_token or "",
                    application_id=payload.application_id or "",
                    location_id=payload.location_id or "",
                    max_amount=payload.max_amount,
                )
            )
    except ProfileNotFoundError as exc:
        raise _not_found(exc) from exc
    except ProfileValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ProfileSaveResponse(id=profile.id, persisted=profiles.persisted)


@router.post("/profiles/{profile_id}/activate", response_model=ActivateResponse, summary="Make a profile active")
async def activate_profile(
    profile_id: str,
    profiles: ProfileService = Depends(get_profile_service),
) -> ActivateResponse:
    try:
        profile = await profiles.activate(profile_id)
    except ProfileNotFoundError as exc:
        raise _not_found(exc) from exc
    return ActivateResponse(name=profile.name, persisted=profiles.persisted)


@router.delete("/profiles/{profile_id}", response_model=SuccessResponse, summary="Delete a profile")
async def delete_profile(
    profile_id: str,
    profiles: ProfileService = Depends(get_profile_service),
) -> SuccessResponse:
    try:
        await profiles.delete(profile_id)
    except LastProfileError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except ProfileNotFoundError as exc:
        raise _not_found(exc) from exc
    return SuccessResponse(persisted=profiles.persisted)


@router.post(
    "/profiles/{profile_id}/refresh-token",
    response_model=SuccessResponse,
    summary="Refresh an OAuth access token",
)
async def refresh_profile_token(
    profile_id: str,
    oauth: OAuthService = Depends(get_oauth_service),
    profiles: ProfileService = Depends(get_profile_service),
) -> SuccessResponse:
    try:
        await oauth.refresh(profile_id)
    except OAuthNotConfiguredError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except ProfileNotFoundError as exc:
        raise _not_found(exc) from exc
    except OAuthExchangeError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return SuccessResponse(persisted=profiles.persisted)


@router.get(
    "/profiles/{profile_id}/transactions",
    response_model=TransactionListResponse,
    summary="Recent transactions of a profile",
)
async def profile_transactions(
    profile_id: str,
    profiles: ProfileService = Depends(get_profile_service),
) -> TransactionListResponse:
    try:
        transactions = await profiles.list_transactions(profile_id)
    except ProfileNotFoundError as exc:
        raise _not_found(exc) from exc
    return TransactionListResponse(
        profile_id=profile_id,
        transactions=[TransactionResponse.model_validate(tx) for tx in transactions],
    )


@router.delete(
    "/profiles/{profile_id}/transactions",
    response_model=ClearTransactionsResponse,
    summary="Clear the transaction history of a profile",
)
async def clear_profile_transactions(
    profile_id: str,
    profiles: ProfileService = Depends(get_profile_service),
) -> ClearTransactionsResponse:
    try:
        removed = await profiles.clear_transactions(profile_id)
    except ProfileNotFoundError as exc:
        raise _not_found(exc) from exc
    return ClearTransactionsResponse(removed=removed, persisted=profiles.persisted)


@router.get("/transactions", response_model=TransactionListResponse, summary="Recent transactions of the active profile")
async def active_transactions(profiles: ProfileService = Depends(get_profile_service)) -> TransactionListResponse:
    profile = await profiles.get_active()
    return TransactionListResponse(
        profile_id=profile.id,
        transactions=[TransactionResponse.model_validate(tx) for tx in profile.transactions],
    )
