"""PayPal checkout schemas."""

from typing import Optional

from pydantic import Field

from .base import StandardizedModel, StrictRequestModel


class CreateOrderRequest(StrictRequestModel):
    session_id: str = Field(..., min_length=1)


class CreateOrderResponse(StandardizedModel):
    order_id: str
    approval_url: Optional[str] = Field(None, description="PayPal link with rel=approve")


class CaptureOrderRequest(StrictRequestModel):
    order_id: str = Field(..., min_length=1)
    session_id: str = Field(..., min_length=1)


class CaptureOrderResponse(StandardizedModel):
    success: bool
    payment_id: str
    capture_id: Optional[str] = None
