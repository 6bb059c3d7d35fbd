"""Booking type schemas."""

from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from .base import Money, StandardizedModel, StrictRequestModel, UtcDateTime


def non_negative_price(value: Optional[Decimal]) -> Optional[Decimal]:
    if value is not None and value < 0:
        raise ValueError("Price must be zero or greater")
    return value


class BookingTypeCreate(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    base_price: Money

    @field_validator("base_price")
    @classmethod
    def check_price(cls, value):
        return non_negative_price(value)


class BookingTypeUpdate(StrictRequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    base_price: Optional[Money] = None
    is_active: Optional[bool] = None

    @field_validator("base_price")
    @classmethod
    def check_price(cls, value):
        return non_negative_price(value)


class BookingTypeResponse(StandardizedModel):
    id: str
    name: str
    description: Optional[str] = None
    base_price: Money
    is_active: bool
    coach_id: str
    created_at: UtcDateTime
    updated_at: UtcDateTime
