# backend/app/repositories/factory.py
"""
Repository factory for the Courtside platform.

Services build their repositories through this factory so construction stays
in one place and tests can swap implementations.
"""

from sqlalchemy.orm import Session

from .account_repository import AccountRepository, RefreshTokenRepository
from .booking_type_repository import BookingTypeRepository
from .conversation_repository import ConversationRepository
from .custom_service_repository import CustomServiceRepository
from .discount_repository import DiscountRepository
from .message_repository import MessageRepository
from .notification_repository import NotificationRepository
from .session_repository import SessionRepository
from .time_slot_repository import TimeSlotRepository


class RepositoryFactory:
    """Static constructors for every repository."""

    @staticmethod
    def create_account_repository(db: Session) -> AccountRepository:
        return AccountRepository(db)

    @staticmethod
    def create_refresh_token_repository(db: Session) -> RefreshTokenRepository:
        return RefreshTokenRepository(db)

    @staticmethod
    def create_booking_type_repository(db: Session) -> BookingTypeRepository:
        return BookingTypeRepository(db)

    @staticmethod
    def create_time_slot_repository(db: Session) -> TimeSlotRepository:
        return TimeSlotRepository(db)

    @staticmethod
    def create_session_repository(db: Session) -> SessionRepository:
        return SessionRepository(db)

    @staticmethod
    def create_discount_repository(db: Session) -> DiscountRepository:
        return DiscountRepository(db)

    @staticmethod
    def create_message_repository(db: Session) -> MessageRepository:
        return MessageRepository(db)

    @staticmethod
    def create_conversation_repository(db: Session) -> ConversationRepository:
        return ConversationRepository(db)

    @staticmethod
    def create_custom_service_repository(db: Session) -> CustomServiceRepository:
        return CustomServiceRepository(db)

    @staticmethod
    def create_notification_repository(db: Session) -> NotificationRepository:
        return NotificationRepository(db)
