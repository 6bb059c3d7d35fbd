# backend/app/models/custom_service.py
"""
Custom service model.

A custom service is an ad-hoc offering a coach writes for one client (or
saves as a reusable template) and shares through chat. It can prefill the
booking type, date and slot the client should book.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base


class CustomService(Base):
    """Coach-authored offering sendable to a specific client."""

    __tablename__ = "custom_services"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    base_price = Column(Numeric(10, 2), nullable=False)
    duration = Column(Integer, nullable=False, default=60)
    is_template = Column(Boolean, nullable=False, default=False)
    is_public = Column(Boolean, nullable=False, default=False)
    usage_count = Column(Integer, nullable=False, default=0)

    prefilled_booking_type_id = Column(
        String(26), ForeignKey("booking_types.id", ondelete="SET NULL"), nullable=True
    )
    prefilled_date_time = Column(DateTime(timezone=True), nullable=True)
    prefilled_time_slot_id = Column(
        String(26), ForeignKey("time_slots.id", ondelete="SET NULL"), nullable=True
    )
    coach_id = Column(
        String(26), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    coach = relationship("Account", foreign_keys=[coach_id])
    prefilled_booking_type = relationship("BookingType")
    prefilled_time_slot = relationship("TimeSlot")

    __table_args__ = (
        CheckConstraint("base_price >= 0", name="check_custom_service_price_non_negative"),
        CheckConstraint("duration > 0", name="check_custom_service_duration_positive"),
    )

    def __repr__(self) -> str:
        return f"<CustomService {self.id}: {self.name} coach={self.coach_id}>"
