"""Discount code schemas."""

from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from .base import Money, StandardizedModel, StrictRequestModel, UtcDateTime


def positive_amount(value: Optional[Decimal]) -> Optional[Decimal]:
    if value is not None and value <= 0:
        raise ValueError("Discount amount must be greater than zero")
    return value


class DiscountCreate(StrictRequestModel):
    code: str = Field(..., min_length=3, max_length=64, pattern=r"^[A-Za-z0-9_-]+$")
    amount: Money
    expiry: UtcDateTime
    max_usage: int = Field(1, ge=1)
    is_active: bool = True

    @field_validator("amount")
    @classmethod
    def check_amount(cls, value):
        return positive_amount(value)


class DiscountUpdate(StrictRequestModel):
    amount: Optional[Money] = None
    expiry: Optional[UtcDateTime] = None
    max_usage: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None

    @field_validator("amount")
    @classmethod
    def check_amount(cls, value):
        return positive_amount(value)


class DiscountValidateRequest(StrictRequestModel):
    code: str = Field(..., min_length=1, max_length=64)
    coach_id: Optional[str] = None


class DiscountValidateResponse(StandardizedModel):
    code: str
    amount: Money
    is_valid: bool


class DiscountResponse(StandardizedModel):
    id: str
    code: str
    amount: Money
    expiry: UtcDateTime
    use_count: int
    max_usage: int
    is_active: bool
    coach_id: str
    created_at: UtcDateTime
    updated_at: UtcDateTime
