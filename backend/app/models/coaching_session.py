# backend/app/models/coaching_session.py
"""
Coaching session model for the Courtside platform.

A session links a client, a coach, a booking type and the time slot it
consumed. Price is snapshotted at booking time (after any discount) so
later edits to the booking type or discount do not change what was owed.

Named ``CoachingSession`` to keep it apart from SQLAlchemy's ``Session``;
the table is ``sessions``.
"""

from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import SessionStatus
from ..core.timezone_utils import ensure_utc
from ..database import Base

logger = logging.getLogger(__name__)


class CoachingSession(Base):
    """Scheduled booking between a client and a coach."""

    __tablename__ = "sessions"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))

    date_time = Column(DateTime(timezone=True), nullable=False, index=True)
    duration_min = Column(Integer, nullable=False, default=60)
    price = Column(Numeric(10, 2), nullable=False)
    is_paid = Column(Boolean, nullable=False, default=False)
    status = Column(String(20), nullable=False, default=SessionStatus.SCHEDULED.value, index=True)
    notes = Column(Text, nullable=True)
    payment_id = Column(String(255), nullable=True)
    discount_code = Column(String(64), nullable=True)
    calendar_event_id = Column(String(255), nullable=True, index=True)

    user_id = Column(String(26), ForeignKey("accounts.id"), nullable=False, index=True)
    coach_id = Column(String(26), ForeignKey("accounts.id"), nullable=False, index=True)
    booking_type_id = Column(String(26), ForeignKey("booking_types.id"), nullable=False)
    time_slot_id = Column(String(26), ForeignKey("time_slots.id"), nullable=False, index=True)
    discount_id = Column(
        String(26), ForeignKey("discounts.id", ondelete="SET NULL"), nullable=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    user = relationship("Account", foreign_keys=[user_id])
    coach = relationship("Account", foreign_keys=[coach_id])
    booking_type = relationship("BookingType")
    time_slot = relationship("TimeSlot")
    discount = relationship("Discount")

    __table_args__ = (
        CheckConstraint(
            "status IN ('SCHEDULED', 'CONFIRMED', 'COMPLETED', 'CANCELLED', 'NO_SHOW')",
            name="ck_sessions_status",
        ),
        CheckConstraint("duration_min > 0", name="check_session_duration_positive"),
        CheckConstraint("price >= 0", name="check_session_price_non_negative"),
    )

    def __repr__(self) -> str:
        return (
            f"<CoachingSession {self.id}: user={self.user_id}, coach={self.coach_id}, "
            f"at={self.date_time}, status={self.status}, paid={self.is_paid}>"
        )

    @property
    def starts_at(self) -> datetime:
        return ensure_utc(self.date_time)

    @property
    def ends_at(self) -> datetime:
        return self.starts_at + timedelta(minutes=self.duration_min)

    def is_past(self, now: datetime | None = None) -> bool:
        return self.starts_at < (now or datetime.now(timezone.utc))

    def is_participant(self, account_id: str) -> bool:
        return account_id in (self.user_id, self.coach_id)

    def cancel(self) -> None:
        """Cancel this session and release its slot."""
        self.status = SessionStatus.CANCELLED.value
        if self.time_slot is not None:
            self.time_slot.is_available = True
        logger.info(f"Session {self.id} cancelled")

    def mark_paid(self, payment_id: str) -> None:
        """Record a captured payment."""
        self.is_paid = True
        self.payment_id = payment_id
        if self.status == SessionStatus.SCHEDULED.value:
            self.status = SessionStatus.CONFIRMED.value
        logger.info(f"Session {self.id} marked as paid ({payment_id})")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "date_time": self.date_time,
            "duration_min": self.duration_min,
            "price": float(self.price) if self.price is not None else None,
            "is_paid": self.is_paid,
            "status": self.status,
            "user_id": self.user_id,
            "coach_id": self.coach_id,
            "booking_type_id": self.booking_type_id,
            "time_slot_id": self.time_slot_id,
        }


# One live session per slot; cancelled sessions release it
ACTIVE_SLOT_INDEX = "uq_sessions_active_time_slot"

Index(
    ACTIVE_SLOT_INDEX,
    CoachingSession.time_slot_id,
    unique=True,
    sqlite_where=(CoachingSession.status != SessionStatus.CANCELLED.value),
    postgresql_where=(CoachingSession.status != SessionStatus.CANCELLED.value),
)
