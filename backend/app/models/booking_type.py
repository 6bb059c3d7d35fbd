# backend/app/models/booking_type.py
"""
Booking type model for the Courtside platform.

A booking type is a coach-defined offering ("Private lesson", "Match play")
with a base price. Sessions snapshot the final price at booking time, so a
later price change never rewrites history. Booking types are soft deleted by
flipping ``is_active``.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base


class BookingType(Base):
    """Coach-defined service offering with a base price."""

    __tablename__ = "booking_types"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    base_price = Column(Numeric(10, 2), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    coach_id = Column(
        String(26), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    coach = relationship("Account", foreign_keys=[coach_id])

    __table_args__ = (CheckConstraint("base_price >= 0", name="check_base_price_non_negative"),)

    def __repr__(self) -> str:
        return f"<BookingType {self.id}: {self.name} coach={self.coach_id} price={self.base_price}>"
