"""Time slot schemas."""

from typing import Optional

from pydantic import Field

from ..core.constants import DEFAULT_SESSION_DURATION, MIN_SLOT_DURATION
from .base import StandardizedModel, StrictRequestModel, UtcDateTime


class TimeSlotCreate(StrictRequestModel):
    date_time: UtcDateTime
    duration_min: int = Field(DEFAULT_SESSION_DURATION, ge=MIN_SLOT_DURATION, le=24 * 60)
    is_available: bool = True


class TimeSlotUpdate(StrictRequestModel):
    date_time: Optional[UtcDateTime] = None
    duration_min: Optional[int] = Field(None, ge=MIN_SLOT_DURATION, le=24 * 60)
    is_available: Optional[bool] = None


class TimeSlotResponse(StandardizedModel):
    id: str
    date_time: UtcDateTime
    duration_min: int
    is_available: bool
    coach_id: str
    created_at: UtcDateTime
    updated_at: UtcDateTime
