"""Chat message schemas."""

from typing import List, Optional

from pydantic import Field

from ..core.enums import MessageType
from .base import StandardizedModel, StrictRequestModel, UtcDateTime


class MessageCreate(StrictRequestModel):
    receiver_id: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1, max_length=5000)
    session_id: Optional[str] = None
    message_type: MessageType = MessageType.TEXT
    custom_service_id: Optional[str] = None


class BookingRequestCreate(StrictRequestModel):
    coach_id: str = Field(..., min_length=1)
    booking_type_id: str = Field(..., min_length=1)
    message: Optional[str] = Field(None, max_length=5000)


class MessageResponse(StandardizedModel):
    id: str
    content: str
    sent_at: UtcDateTime
    sender_id: str
    receiver_id: str
    sender_type: str
    receiver_type: str
    message_type: MessageType
    session_id: Optional[str] = None
    custom_service_id: Optional[str] = None
    conversation_id: Optional[str] = None
    is_read: bool
    read_at: Optional[UtcDateTime] = None


class PaginatedMessagesResponse(StandardizedModel):
    messages: List[MessageResponse]
    total: int
    page: int
    limit: int
