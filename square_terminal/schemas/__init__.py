"""Pydantic schemas used by the HTTP layer.

Bodies use camelCase on the wire, matching the browser client.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)


class SessionData(BaseModel):
    username: str


class SessionResponse(CamelModel):
    authenticated: bool
    auth_required: bool
    username: Optional[str] = None


class SuccessResponse(CamelModel):
    success: bool = True
    persisted: bool = True


class ConfigResponse(CamelModel):
    application_id: str
    location_id: str
    environment: str
    profile_id: str
    profile_name: str
    max_amount: Optional[Decimal] = None
    oauth_enabled: bool = False


class ProfileResponse(CamelModel):
    id: str
    name: str
    application_id: str
    location_id: str
    access_token_masked: str
    active: bool
    max_amount: Optional[Decimal] = None
    merchant_id: Optional[str] = None
    token_expires_at: Optional[datetime] = None
    transaction_count: int = 0


class ProfileListResponse(CamelModel):
    active_id: str
    profiles: list[ProfileResponse]


class ProfileUpsertRequest(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    access_token: Optional[str] = None
    application_id: Optional[str] = None
    location_id: Optional[str] = None
    max_amount: Optional[Decimal] = None


class ProfileSaveResponse(SuccessResponse):
    id: str


class ActivateResponse(SuccessResponse):
    name: str


class TransactionResponse(CamelModel):
    id: str
    type: str
    amount_cents: int
    currency: str
    status: str
    created_at: datetime
    payment_id: Optional[str] = None
    link_id: Optional[str] = None
    url: Optional[str] = None
    receipt_url: Optional[str] = None
    note: Optional[str] = None
    error: Optional[str] = None


class TransactionListResponse(CamelModel):
    profile_id: str
    transactions: list[TransactionResponse]


class ClearTransactionsResponse(SuccessResponse):
    removed: int


AmountField = Optional[Union[float, str]]


class ChargeRequest(CamelModel):
    source_id: Optional[str] = None
    amount: AmountField = None
    currency: Optional[str] = None
    note: Optional[str] = None
    buyer_email: Optional[str] = None
    verification_token: Optional[str] = None


class MoneyResponse(CamelModel):
    amount: str
    currency: str


class ChargeResponse(CamelModel):
    success: bool = True
    payment_id: str
    status: str
    amount: MoneyResponse
    receipt_url: Optional[str] = None
    transaction_id: str


class PaymentLinkRequest(CamelModel):
    amount: AmountField = None
    currency: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None


class PaymentLinkResponse(CamelModel):
    success: bool = True
    url: str
    link_id: str
    transaction_id: str


class ProcessorErrorResponse(CamelModel):
    success: bool = False
    errors: list[dict[str, Any]]
