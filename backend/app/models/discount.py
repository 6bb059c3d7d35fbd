# backend/app/models/discount.py
"""
Discount model for the Courtside platform.

Coaches issue discount codes that take a fixed amount off a booking type's
base price. A code is usable while it is active, not expired and used fewer
than ``max_usage`` times.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.timezone_utils import ensure_utc
from ..database import Base


class Discount(Base):
    """Coach-issued code reducing a session price."""

    __tablename__ = "discounts"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    code = Column(String(64), unique=True, nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    expiry = Column(DateTime(timezone=True), nullable=False)
    use_count = Column(Integer, nullable=False, default=0)
    max_usage = Column(Integer, nullable=False, default=1)
    is_active = Column(Boolean, nullable=False, default=True)
    coach_id = Column(
        String(26), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    coach = relationship("Account", foreign_keys=[coach_id])

    __table_args__ = (
        CheckConstraint("amount > 0", name="check_discount_amount_positive"),
        CheckConstraint("max_usage >= 1", name="check_discount_max_usage"),
        CheckConstraint("use_count >= 0", name="check_discount_use_count"),
    )

    def is_expired(self, now: datetime | None = None) -> bool:
        return ensure_utc(self.expiry) <= (now or datetime.now(timezone.utc))

    @property
    def is_exhausted(self) -> bool:
        return self.use_count >= self.max_usage

    def is_usable(self, now: datetime | None = None) -> bool:
        return bool(self.is_active) and not self.is_expired(now) and not self.is_exhausted

    def __repr__(self) -> str:
        usage = f"{self.use_count}/{self.max_usage}"
        return f"<Discount {self.code}: amount={self.amount} used={usage}>"
