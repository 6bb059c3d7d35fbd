# backend/app/core/enums.py
"""
Core enums for the Courtside platform.

This module contains enumeration types used throughout the application
for type safety and consistency. Values match what is stored in the
database and returned by the API.
"""

from enum import Enum


class Role(str, Enum):
    """Account roles."""

    USER = "USER"
    PREMIUM_USER = "PREMIUM_USER"
    COACH = "COACH"
    ADMIN = "ADMIN"

    @property
    def is_client(self) -> bool:
        """Clients book sessions; coaches and admins run them."""
        return self in (Role.USER, Role.PREMIUM_USER)


class SessionStatus(str, Enum):
    """Coaching session lifecycle statuses."""

    SCHEDULED = "SCHEDULED"  # Booked, awaiting payment
    CONFIRMED = "CONFIRMED"  # Paid or free
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


class MessageType(str, Enum):
    TEXT = "TEXT"
    CUSTOM_SERVICE = "CUSTOM_SERVICE"
    BOOKING_REQUEST = "BOOKING_REQUEST"


class NotificationType(str, Enum):
    CUSTOM_SERVICE = "CUSTOM_SERVICE"
    BOOKING_REMINDER = "BOOKING_REMINDER"
    BOOKING_CONFIRMATION = "BOOKING_CONFIRMATION"
    ROLE_CHANGE = "ROLE_CHANGE"
    SYSTEM_ANNOUNCEMENT = "SYSTEM_ANNOUNCEMENT"
    MESSAGE_RECEIVED = "MESSAGE_RECEIVED"


class NotificationPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class NotificationChannel(str, Enum):
    IN_APP = "in_app"
    EMAIL = "email"


class AnalyticsTimeRange(str, Enum):
    """Preset windows for dashboard analytics."""

    LAST_7_DAYS = "last_7_days"
    LAST_30_DAYS = "last_30_days"
    LAST_90_DAYS = "last_90_days"
    LAST_YEAR = "last_year"
    CUSTOM = "custom"


class ExportFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
