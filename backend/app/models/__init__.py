"""
Database models for the Courtside platform.

This module exports all SQLAlchemy models used in the application:
- Accounts and refresh tokens
- Coach offerings (booking types, time slots, discounts, custom services)
- Coaching sessions
- Messaging (messages, conversations) and notifications
"""

from .account import Account, RefreshToken
from .booking_type import BookingType
from .coaching_session import CoachingSession
from .conversation import Conversation
from .custom_service import CustomService
from .discount import Discount
from .message import Message
from .notification import Notification
from .time_slot import TimeSlot

__all__ = [
    "Account",
    "RefreshToken",
    "BookingType",
    "TimeSlot",
    "CoachingSession",
    "Discount",
    "CustomService",
    "Message",
    "Conversation",
    "Notification",
]
