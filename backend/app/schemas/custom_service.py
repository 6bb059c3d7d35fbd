"""Custom service schemas."""

from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from .base import Money, StandardizedModel, StrictRequestModel, UtcDateTime


def non_negative(value: Optional[Decimal]) -> Optional[Decimal]:
    if value is not None and value < 0:
        raise ValueError("Price must be zero or greater")
    return value


class CustomServiceCreate(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    base_price: Money
    duration: int = Field(60, gt=0, le=24 * 60)
    is_template: bool = False
    is_public: bool = False
    prefilled_booking_type_id: Optional[str] = None
    prefilled_date_time: Optional[UtcDateTime] = None
    prefilled_time_slot_id: Optional[str] = None

    @field_validator("base_price")
    @classmethod
    def check_price(cls, value):
        return non_negative(value)


class CustomServiceUpdate(StrictRequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    base_price: Optional[Money] = None
    duration: Optional[int] = Field(None, gt=0, le=24 * 60)
    is_template: Optional[bool] = None
    is_public: Optional[bool] = None
    prefilled_booking_type_id: Optional[str] = None
    prefilled_date_time: Optional[UtcDateTime] = None
    prefilled_time_slot_id: Optional[str] = None

    @field_validator("base_price")
    @classmethod
    def check_price(cls, value):
        return non_negative(value)


class SendToUserRequest(StrictRequestModel):
    user_id: str = Field(..., min_length=1)
    message: Optional[str] = Field(None, max_length=5000)


class CustomServiceResponse(StandardizedModel):
    id: str
    name: str
    description: Optional[str] = None
    base_price: Money
    duration: int
    is_template: bool
    is_public: bool
    usage_count: int
    prefilled_booking_type_id: Optional[str] = None
    prefilled_date_time: Optional[UtcDateTime] = None
    prefilled_time_slot_id: Optional[str] = None
    coach_id: str
    created_at: UtcDateTime
    updated_at: UtcDateTime
