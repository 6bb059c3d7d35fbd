# backend/app/models/conversation.py
"""
Conversation model for per-pair messaging.

Each pair of accounts has exactly one conversation. The pair is stored both
as a sorted JSON list (``participant_ids``) for presentation and as a joined
``participant_key`` so the pair can be looked up with a unique index on any
database backend.
"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship
from sqlalchemy.types import JSON
import ulid

from ..database import Base


def participant_key_for(first_id: str, second_id: str) -> str:
    """Order-independent key for an account pair."""
    return ":".join(sorted((first_id, second_id)))


class Conversation(Base):
    """
    Conversation between two accounts.

    Attributes:
        participant_ids: Sorted list of the two account ids
        last_message_id: Most recent message, used for previews
        is_pinned / pinned_at / pinned_by: Pin state set by a coach or admin
    """

    __tablename__ = "conversations"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    participant_ids = Column(JSON, nullable=False, default=list)
    participant_key = Column(String(60), nullable=False, unique=True, index=True)
    # Plain column: messages already reference conversations
    last_message_id = Column(String(26), nullable=True)
    last_message_at = Column(DateTime(timezone=True), nullable=True, index=True)
    is_pinned = Column(Boolean, nullable=False, default=False)
    pinned_at = Column(DateTime(timezone=True), nullable=True)
    pinned_by = Column(String(26), ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    last_message = relationship(
        "Message",
        primaryjoin="foreign(Conversation.last_message_id) == Message.id",
        viewonly=True,
    )
    messages = relationship(
        "Message",
        back_populates="conversation",
        foreign_keys="Message.conversation_id",
        order_by="Message.sent_at",
    )

    def __repr__(self) -> str:
        return f"<Conversation {self.id}: {self.participant_key}>"

    @property
    def participants(self) -> List[str]:
        return list(self.participant_ids or [])

    def is_participant(self, account_id: str) -> bool:
        return account_id in self.participants

    def get_other_user_id(self, account_id: str) -> Optional[str]:
        """Get the id of the other participant."""
        for participant_id in self.participants:
            if participant_id != account_id:
                return participant_id
        return None

    def pin(self, account_id: str) -> None:
        self.is_pinned = True
        self.pinned_at = datetime.now(timezone.utc)
        self.pinned_by = account_id

    def unpin(self) -> None:
        self.is_pinned = False
        self.pinned_at = None
        self.pinned_by = None
