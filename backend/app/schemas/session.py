"""Coaching session schemas."""

from typing import Optional

from pydantic import Field

from ..core.enums import SessionStatus
from .base import Money, StandardizedModel, StrictRequestModel, UtcDateTime


class SessionCreate(StrictRequestModel):
    booking_type_id: str = Field(..., min_length=1)
    time_slot_id: str = Field(..., min_length=1)
    discount_code: Optional[str] = Field(None, max_length=64)
    notes: Optional[str] = Field(None, max_length=2000)


class SessionUpdate(StrictRequestModel):
    notes: Optional[str] = Field(None, max_length=2000)
    status: Optional[SessionStatus] = None
    payment_id: Optional[str] = Field(None, max_length=255)
    calendar_event_id: Optional[str] = Field(None, max_length=255)


class SessionParticipant(StandardizedModel):
    id: str
    name: str
    email: str


class SessionBookingType(StandardizedModel):
    id: str
    name: str
    base_price: Money


class SessionResponse(StandardizedModel):
    id: str
    date_time: UtcDateTime
    duration_min: int
    price: Money
    is_paid: bool
    status: SessionStatus
    notes: Optional[str] = None
    payment_id: Optional[str] = None
    discount_code: Optional[str] = None
    calendar_event_id: Optional[str] = None
    user_id: str
    coach_id: str
    booking_type_id: str
    time_slot_id: str
    discount_id: Optional[str] = None
    user: Optional[SessionParticipant] = None
    coach: Optional[SessionParticipant] = None
    booking_type: Optional[SessionBookingType] = None
    created_at: UtcDateTime
    updated_at: UtcDateTime


class RemindersSentResponse(StandardizedModel):
    sent: int = Field(..., ge=0)
