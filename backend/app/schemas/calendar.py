"""Calendar sync schemas."""

from typing import List

from pydantic import Field

from .base import StandardizedModel, StrictRequestModel, UtcDateTime


class CalendarEventRequest(StrictRequestModel):
    session_id: str = Field(..., min_length=1)


class CalendarEventResponse(StandardizedModel):
    event_id: str
    session_id: str
    summary: str
    description: str
    start: UtcDateTime
    end: UtcDateTime
    attendees: List[str]
