"""Conversation schemas."""

from typing import List, Optional

from .account import AccountBrief
from .base import StandardizedModel, UtcDateTime
from .message import MessageResponse


class ConversationResponse(StandardizedModel):
    id: str
    participant_ids: List[str]
    other_participant: Optional[AccountBrief] = None
    last_message: Optional[MessageResponse] = None
    last_message_at: Optional[UtcDateTime] = None
    is_pinned: bool
    pinned_at: Optional[UtcDateTime] = None
    pinned_by: Optional[str] = None
    unread_count: int = 0
    created_at: UtcDateTime
    updated_at: UtcDateTime


class ConversationReadResponse(StandardizedModel):
    updated_count: int
