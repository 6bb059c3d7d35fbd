# backend/app/models/time_slot.py
"""
Time slot model for the Courtside platform.

Coaches publish bookable intervals. Booking a slot flips ``is_available`` to
False inside the same transaction that inserts the session; cancelling the
session flips it back.
"""

from datetime import timedelta

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.timezone_utils import ensure_utc
from ..database import Base


class TimeSlot(Base):
    """Coach-defined bookable interval."""

    __tablename__ = "time_slots"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    date_time = Column(DateTime(timezone=True), nullable=False, index=True)
    duration_min = Column(Integer, nullable=False, default=60)
    is_available = Column(Boolean, nullable=False, default=True)
    coach_id = Column(
        String(26), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    coach = relationship("Account", foreign_keys=[coach_id])

    __table_args__ = (
        CheckConstraint("duration_min >= 15", name="check_slot_duration_min"),
        Index("ix_time_slots_coach_date", "coach_id", "date_time"),
    )

    @property
    def starts_at(self):
        return ensure_utc(self.date_time)

    @property
    def ends_at(self):
        return self.starts_at + timedelta(minutes=self.duration_min)

    def overlaps(self, other: "TimeSlot") -> bool:
        return self.starts_at < other.ends_at and other.starts_at < self.ends_at

    def __repr__(self) -> str:
        return (
            f"<TimeSlot {self.id}: coach={self.coach_id} at={self.date_time} "
            f"duration={self.duration_min} available={self.is_available}>"
        )
