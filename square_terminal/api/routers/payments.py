"""Card charges and payment links for the active profile."""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from square_terminal.api.deps import get_payment_service
from square_terminal.core.security import require_operator
from square_terminal.modules.payments import (
    AmountLimitExceededError,
    ChargeInput,
    InvalidAmountError,
    PaymentLinkInput,
    PaymentProcessorError,
    PaymentService,
)
from square_terminal.schemas import (
    ChargeRequest,
    ChargeResponse,
    MoneyResponse,
    PaymentLinkRequest,
    PaymentLinkResponse,
    ProcessorErrorResponse,
)

router = APIRouter(dependencies=[Depends(require_operator)])

PROCESSOR_ERROR = {status.HTTP_400_BAD_REQUEST: {"model": ProcessorErrorResponse}}


def _processor_error(exc: PaymentProcessorError) -> JSONResponse:
    body = ProcessorErrorResponse(errors=exc.errors)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump(by_alias=True))


@router.post("/charge", response_model=ChargeResponse, responses=PROCESSOR_ERROR, summary="Charge a card")
async def charge(
    payload: ChargeRequest,
    payments: PaymentService = Depends(get_payment_service),
):
    if not payload.source_id or payload.amount in (None, ""):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="sourceId and amount are required")

    try:
        result = await payments.charge(
            ChargeInput(
                source_id=payload.source_id,
                amount=payload.amount,
                currency=payload.currency,
                note=payload.note,
                buyer_email=payload.buyer_email,
                verification_token=payload.verification_token,
            )
        )
    except (InvalidAmountError, AmountLimitExceededError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except PaymentProcessorError as exc:
        return _processor_error(exc)

    return ChargeResponse(
        payment_id=result.payment_id,
        status=result.status,
        amount=MoneyResponse(amount=str(result.amount_cents), currency=result.currency),
        receipt_url=result.receipt_url,
        transaction_id=result.transaction.id,
    )


@router.post(
    "/payment-link",
    response_model=PaymentLinkResponse,
    responses=PROCESSOR_ERROR,
    summary="Create a quick-pay payment link",
)
async def payment_link(
    payload: PaymentLinkRequest,
    payments: PaymentService = Depends(get_payment_service),
):
    if payload.amount in (None, ""):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="amount is required")

    try:
        result = await payments.create_link(
            PaymentLinkInput(
                amount=payload.amount,
                currency=payload.currency,
                title=payload.title,
                description=payload.description,
            )
        )
    except (InvalidAmountError, AmountLimitExceededError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except PaymentProcessorError as exc:
        return _processor_error(exc)

    return PaymentLinkResponse(url=result.url, link_id=result.link_id, transaction_id=result.transaction.id)
