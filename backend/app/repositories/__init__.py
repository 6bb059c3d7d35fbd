# backend/app/repositories/__init__.py
"""
Repository layer for the Courtside platform.

Repositories separate data access from business rules:
- BaseRepository: generic CRUD and error translation
- RepositoryFactory: construction point used by services
- One repository per aggregate (accounts, booking types, time slots,
  sessions, discounts, messages, conversations, custom services,
  notifications)

Usage:
    from app.repositories import RepositoryFactory

    sessions = RepositoryFactory.create_session_repository(db)
    pending = sessions.count_pending_for_user(user_id)
"""

from .account_repository import AccountRepository, RefreshTokenRepository
from .base_repository import BaseRepository
from .booking_type_repository import BookingTypeRepository
from .conversation_repository import ConversationRepository
from .custom_service_repository import CustomServiceRepository
from .discount_repository import DiscountRepository
from .factory import RepositoryFactory
from .message_repository import MessageRepository
from .notification_repository import NotificationRepository
from .session_repository import SessionRepository
from .time_slot_repository import TimeSlotRepository

__all__ = [
    "AccountRepository",
    "BaseRepository",
    "BookingTypeRepository",
    "ConversationRepository",
    "CustomServiceRepository",
    "DiscountRepository",
    "MessageRepository",
    "NotificationRepository",
    "RefreshTokenRepository",
    "RepositoryFactory",
    "SessionRepository",
    "TimeSlotRepository",
]
