# backend/app/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.account_service import AccountService
from ...services.analytics_service import AnalyticsService
from ...services.auth_service import AuthService
from ...services.booking_type_service import BookingTypeService
from ...services.calendar_service import CalendarService
from ...services.conversation_service import ConversationService
from ...services.custom_service_service import CustomServiceService
from ...services.discount_service import DiscountService
from ...services.email import EmailSender, get_email_sender
from ...services.message_service import MessageService
from ...services.notification_service import NotificationService
from ...services.payment_service import PaymentService
from ...services.session_service import SessionService
from ...services.time_slot_service import TimeSlotService
from .database import get_db

logger = logging.getLogger(__name__)


def get_email_service(db: Session = Depends(get_db)) -> EmailSender:
    """Configured email provider (console in development and tests)."""
    return get_email_sender(db)


def get_notification_service(
    db: Session = Depends(get_db), email_sender: EmailSender = Depends(get_email_service)
) -> NotificationService:
    """
    Get notification service instance.

    Args:
        db: Database session
        email_sender: Provider used for booking and ad-hoc emails

    Returns:
        NotificationService instance
    """
    return NotificationService(db, email_sender=email_sender)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_account_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
) -> AccountService:
    return AccountService(db, notification_service=notification_service)


def get_booking_type_service(db: Session = Depends(get_db)) -> BookingTypeService:
    return BookingTypeService(db)


def get_time_slot_service(db: Session = Depends(get_db)) -> TimeSlotService:
    return TimeSlotService(db)


def get_session_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
) -> SessionService:
    return SessionService(db, notification_service=notification_service)


def get_discount_service(db: Session = Depends(get_db)) -> DiscountService:
    return DiscountService(db)


def get_payment_service(db: Session = Depends(get_db)) -> PaymentService:
    """PayPal client is built lazily so unconfigured environments still boot."""
    return PaymentService(db)


def get_message_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
) -> MessageService:
    return MessageService(db, notification_service=notification_service)


def get_conversation_service(db: Session = Depends(get_db)) -> ConversationService:
    return ConversationService(db)


def get_custom_service_service(
    db: Session = Depends(get_db),
    message_service: MessageService = Depends(get_message_service),
    notification_service: NotificationService = Depends(get_notification_service),
) -> CustomServiceService:
    return CustomServiceService(
        db, message_service=message_service, notification_service=notification_service
    )


def get_calendar_service(db: Session = Depends(get_db)) -> CalendarService:
    return CalendarService(db)


def get_analytics_service(db: Session = Depends(get_db)) -> AnalyticsService:
    return AnalyticsService(db)
