"""
In-app notification model for Courtside.

Notifications are addressed to one recipient and may also be delivered by
email, as listed in ``channels``. ``data`` carries a small JSON payload
(session id, custom service id, ...) for the client to deep-link with.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from sqlalchemy.types import JSON
import ulid

from ..core.enums import NotificationChannel, NotificationPriority
from ..database import Base


class Notification(Base):
    """Persisted notification shown in the in-app inbox."""

    __tablename__ = "notifications"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    type = Column(String(32), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    recipient_id = Column(
        String(26),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sender_id = Column(String(26), ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True)
    priority = Column(String(10), nullable=False, default=NotificationPriority.MEDIUM.value)
    channels = Column(JSON, nullable=False, default=lambda: [NotificationChannel.IN_APP.value])
    data = Column(JSON, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    scheduled_for = Column(DateTime(timezone=True), nullable=True)
    sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    recipient = relationship("Account", foreign_keys=[recipient_id])
    sender = relationship("Account", foreign_keys=[sender_id])

    __table_args__ = (
        CheckConstraint(
            "priority IN ('LOW', 'MEDIUM', 'HIGH', 'URGENT')",
            name="ck_notifications_priority",
        ),
        Index("idx_notifications_recipient_created", "recipient_id", "created_at"),
        Index("idx_notifications_recipient_unread", "recipient_id", "is_read"),
    )

    def mark_read(self) -> None:
        self.is_read = True
        self.read_at = datetime.now(timezone.utc)

    def __repr__(self) -> str:
        return f"<Notification {self.id}: {self.type} -> {self.recipient_id}>"
