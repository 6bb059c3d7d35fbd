# backend/app/routes/v1/payments.py
"""
Payment routes - API v1

Versioned PayPal checkout endpoints under /api/v1/payments.
All business logic delegated to PaymentService.

Endpoints:
    POST /create-order   → Create a PayPal order for one of my unpaid sessions
    POST /capture-order  → Capture an approved order and mark the session paid
"""

import asyncio
import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, status

from ...api.dependencies import get_current_active_user, get_payment_service
from ...core.exceptions import DomainException
from ...models.account import Account
from ...schemas.payment import (
    CaptureOrderRequest,
    CaptureOrderResponse,
    CreateOrderRequest,
    CreateOrderResponse,
)
from ...services.payment_service import PaymentService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["payments-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.post("/create-order", response_model=CreateOrderResponse)
async def create_order(
    payload: CreateOrderRequest,
    current_user: Account = Depends(get_current_active_user),
    payment_service: PaymentService = Depends(get_payment_service),
) -> CreateOrderResponse:
    """
    Start PayPal checkout for a session.

    Raises:
        HTTPException: 404 unknown session, 403 not the booking client,
            400 already paid, 502 PayPal failure
    """
    try:
        result = await asyncio.to_thread(
            payment_service.create_order, payload.session_id, current_user
        )
        return CreateOrderResponse(**result)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/capture-order", response_model=CaptureOrderResponse)
async def capture_order(
    payload: CaptureOrderRequest,
    current_user: Account = Depends(get_current_active_user),
    payment_service: PaymentService = Depends(get_payment_service),
) -> CaptureOrderResponse:
    try:
        result = await asyncio.to_thread(
            payment_service.capture_order, payload.order_id, payload.session_id, current_user
        )
        return CaptureOrderResponse(**result)
    except DomainException as e:
        handle_domain_exception(e)
