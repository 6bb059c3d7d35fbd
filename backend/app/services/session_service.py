# backend/app/services/session_service.py
"""
Session (booking) service for Courtside.

Booking runs as a read-then-write sequence of application checks followed by
a single transaction that inserts the session, takes the slot and consumes
the discount:

1. the client holds fewer than ``max_pending_bookings`` unpaid sessions
2. the booking type exists and is active
3. the slot exists, is available and belongs to the booking type's coach
4. a usable discount of the same coach lowers the price (never below zero)
5. free sessions are confirmed and paid immediately
"""

from datetime import datetime
from decimal import Decimal
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import SessionStatus
from ..core.exceptions import (
    ForbiddenException,
    NotFoundException,
    PendingBookingLimitException,
    RepositoryException,
    SlotUnavailableException,
    ValidationException,
)
from ..core.timezone_utils import ensure_utc, tomorrow_bounds
from ..models.account import Account
from ..models.coaching_session import ACTIVE_SLOT_INDEX, CoachingSession
from ..models.discount import Discount
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

REMINDER_STATUSES = (SessionStatus.SCHEDULED, SessionStatus.CONFIRMED)


def discounted_price(base_price: Decimal, discount: Optional[Discount]) -> Decimal:
    if discount is None:
        return Decimal(base_price)
    return max(Decimal("0"), Decimal(base_price) - Decimal(discount.amount))


def _is_slot_conflict(exc: RepositoryException) -> bool:
    """True when an insert lost the slot to another live session."""
    cause = exc.__cause__
    if not isinstance(cause, IntegrityError):
        return False
    orig = getattr(cause, "orig", None)
    constraint = getattr(getattr(orig, "diag", None), "constraint_name", None)
    if constraint:
        return constraint == ACTIVE_SLOT_INDEX
    # SQLite reports the column rather than the index name
    return "sessions.time_slot_id" in str(orig)


class SessionService(BaseService):
    """Booking, listing and cancellation of coaching sessions."""

    def __init__(self, db: Session, notification_service: Optional[NotificationService] = None):
        super().__init__(db)
        self.repository = RepositoryFactory.create_session_repository(db)
        self.booking_type_repository = RepositoryFactory.create_booking_type_repository(db)
        self.time_slot_repository = RepositoryFactory.create_time_slot_repository(db)
        self.discount_repository = RepositoryFactory.create_discount_repository(db)
        self.notification_service = notification_service or NotificationService(db)

    @BaseService.measure_operation("create_session")
    def create_session(
        self,
        user: Account,
        booking_type_id: str,
        time_slot_id: str,
        discount_code: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> CoachingSession:
        """
        Book a time slot.

        Raises:
            PendingBookingLimitException: Too many unpaid bookings
            ValidationException: Invalid booking type or slot/coach mismatch
            SlotUnavailableException: Slot missing or already taken
        """
        limit = settings.max_pending_bookings
        pending = self.repository.count_pending_for_user(user.id)
        if pending >= limit:
            raise PendingBookingLimitException(limit=limit, pending=pending)

        booking_type = self.booking_type_repository.get_by_id(booking_type_id)
        if booking_type is None or not booking_type.is_active:
            raise ValidationException("Invalid booking type", code="INVALID_BOOKING_TYPE")

        slot = self.time_slot_repository.get_by_id(time_slot_id)
        if slot is None or not slot.is_available:
            raise SlotUnavailableException(time_slot_id)
        if slot.coach_id != booking_type.coach_id:
            raise ValidationException(
                "Time slot does not belong to the booking type's coach",
                code="SLOT_COACH_MISMATCH",
            )

        discount = self._usable_discount(discount_code, booking_type.coach_id)
        price = discounted_price(booking_type.base_price, discount)
        is_free = price == 0
        status = SessionStatus.CONFIRMED if is_free else SessionStatus.SCHEDULED

        with self.transaction():
            try:
                session = self.repository.create(
                    date_time=slot.date_time,
                    duration_min=slot.duration_min,
                    price=price,
                    is_paid=is_free,
                    status=status.value,
                    notes=notes,
                    discount_code=discount.code if discount else None,
                    discount_id=discount.id if discount else None,
                    user_id=user.id,
                    coach_id=booking_type.coach_id,
                    booking_type_id=booking_type.id,
                    time_slot_id=slot.id,
                )
            except RepositoryException as exc:
                if _is_slot_conflict(exc):
                    raise SlotUnavailableException(time_slot_id) from exc
                raise
            slot.is_available = False
            if discount is not None:
                self.discount_repository.increment_usage(discount)

        prometheus_metrics.inc_booking(session.status)
        self.log_operation(
            "create_session", session_id=session.id, user_id=user.id, price=str(price)
        )

        session = self.repository.get_by_id(session.id)
        self.notification_service.notify_booking_confirmation(session)
        return session

    def _usable_discount(self, code: Optional[str], coach_id: str) -> Optional[Discount]:
        if not code:
            return None
        discount = self.discount_repository.get_active_by_code(code)
        if discount is None or not discount.is_usable() or discount.coach_id != coach_id:
            self.logger.info(f"Ignoring unusable discount code {code}")
            return None
        return discount

    def list_sessions(
        self,
        account: Account,
        status: Optional[SessionStatus] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[CoachingSession]:
        """Clients see sessions they booked; coaches and admins those they run."""
        return self.repository.list_for_account(
            account.id,
            as_coach=not account.is_client,
            status=status,
            start_date=ensure_utc(start_date) if start_date else None,
            end_date=ensure_utc(end_date) if end_date else None,
        )

    def get_session(self, session_id: str, account: Account) -> CoachingSession:
        session = self.repository.get_by_id(session_id)
        if session is None:
            raise NotFoundException("Session not found", code="SESSION_NOT_FOUND")
        if not (account.is_admin or session.is_participant(account.id)):
            raise ForbiddenException("You do not have access to this session")
        return session

    @BaseService.measure_operation("update_session")
    def update_session(
        self, session_id: str, account: Account, data: Dict[str, Any]
    ) -> CoachingSession:
        """
        Update notes, payment and calendar references or move the status.

        Cancelling through here releases the slot like ``cancel_session``;
        a cancelled session cannot be brought back since its slot may have
        been booked again.

        Raises:
            ValidationException: Reopening a cancelled session
        """
        session = self.get_session(session_id, account)
        updates = dict(data)
        status = updates.pop("status", None)
        if isinstance(status, SessionStatus):
            status = status.value
        if status is not None and status != session.status:
            if session.status == SessionStatus.CANCELLED.value:
                raise ValidationException(
                    "Cancelled sessions cannot be reopened", code="SESSION_CANCELLED"
                )
        else:
            status = None

        with self.transaction():
            self.repository.update_entity(session, **updates)
            if status == SessionStatus.CANCELLED.value:
                session.cancel()
            elif status is not None:
                session.status = status
        if status is not None:
            prometheus_metrics.inc_booking(session.status)
            self.log_operation("update_session_status", session_id=session.id, status=status)
        return session

    @BaseService.measure_operation("cancel_session")
    def cancel_session(self, session_id: str, account: Account) -> CoachingSession:
        """
        Raises:
            ValidationException: Already cancelled, or the session is in the past
        """
        session = self.get_session(session_id, account)
        if session.status == SessionStatus.CANCELLED.value:
            raise ValidationException("Session already cancelled", code="ALREADY_CANCELLED")
        if session.is_past():
            raise ValidationException("Cannot cancel past sessions", code="SESSION_IN_PAST")

        with self.transaction():
            session.cancel()
        prometheus_metrics.inc_booking(session.status)
        self.log_operation("cancel_session", session_id=session.id, cancelled_by=account.id)
        return session

    @BaseService.measure_operation("send_reminders")
    def send_reminders(self, now: Optional[datetime] = None) -> int:
        """Remind clients of tomorrow's (UTC) sessions; returns how many were sent."""
        start, end = tomorrow_bounds(now)
        sessions = self.repository.list_starting_between(start, end, REMINDER_STATUSES)
        sent = sum(
            1 for session in sessions if self.notification_service.notify_booking_reminder(session)
        )
        self.logger.info(f"Sent {sent} of {len(sessions)} booking reminders")
        return sent
