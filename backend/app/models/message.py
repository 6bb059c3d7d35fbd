# backend/app/models/message.py
"""
Message model for the chat system.

Messages are exchanged between any two accounts (usually a client and a
coach). A message may reference the session it is about, or carry a custom
service or booking request payload. Every message belongs to the single
conversation of its participant pair.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship
import ulid

from ..core.enums import MessageType
from ..database import Base


class Message(Base):
    """Chat message between two accounts."""

    __tablename__ = "messages"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    content = Column(Text, nullable=False)
    sent_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    sender_id = Column(String(26), ForeignKey("accounts.id"), nullable=False)
    receiver_id = Column(String(26), ForeignKey("accounts.id"), nullable=False)
    sender_type = Column(String(20), nullable=False)
    receiver_type = Column(String(20), nullable=False)
    message_type = Column(String(20), nullable=False, default=MessageType.TEXT.value)

    session_id = Column(String(26), ForeignKey("sessions.id", ondelete="SET NULL"), nullable=True)
    custom_service_id = Column(
        String(26), ForeignKey("custom_services.id", ondelete="SET NULL"), nullable=True
    )
    conversation_id = Column(
        String(26), ForeignKey("conversations.id", ondelete="SET NULL"), nullable=True
    )

    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    sender = relationship("Account", foreign_keys=[sender_id])
    receiver = relationship("Account", foreign_keys=[receiver_id])
    session = relationship("CoachingSession")
    custom_service = relationship("CustomService")
    conversation = relationship(
        "Conversation", back_populates="messages", foreign_keys=[conversation_id]
    )

    __table_args__ = (
        Index("ix_messages_sender_receiver", "sender_id", "receiver_id"),
        Index("ix_messages_receiver_unread", "receiver_id", "is_read"),
        Index("ix_messages_conversation_sent", "conversation_id", "sent_at"),
    )

    def is_participant(self, account_id: str) -> bool:
        return account_id in (self.sender_id, self.receiver_id)

    def mark_read(self) -> None:
        self.is_read = True
        self.read_at = datetime.now(timezone.utc)

    def __repr__(self) -> str:
        return f"<Message {self.id}: {self.sender_id} -> {self.receiver_id} ({self.message_type})>"
