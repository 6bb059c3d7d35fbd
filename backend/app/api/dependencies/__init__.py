# backend/app/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import (
    get_current_active_user,
    get_current_user,
    get_current_user_sse,
    require_admin,
    require_coach,
    require_coach_or_admin,
    require_roles,
)
from .database import get_db
from .services import (
    get_account_service,
    get_analytics_service,
    get_auth_service,
    get_booking_type_service,
    get_calendar_service,
    get_conversation_service,
    get_custom_service_service,
    get_discount_service,
    get_message_service,
    get_notification_service,
    get_payment_service,
    get_session_service,
    get_time_slot_service,
)

__all__ = [
    # Auth
    "get_current_user",
    "get_current_active_user",
    "get_current_user_sse",
    "require_roles",
    "require_coach",
    "require_admin",
    "require_coach_or_admin",
    # Database
    "get_db",
    # Services
    "get_account_service",
    "get_analytics_service",
    "get_auth_service",
    "get_booking_type_service",
    "get_calendar_service",
    "get_conversation_service",
    "get_custom_service_service",
    "get_discount_service",
    "get_message_service",
    "get_notification_service",
    "get_payment_service",
    "get_session_service",
    "get_time_slot_service",
]
