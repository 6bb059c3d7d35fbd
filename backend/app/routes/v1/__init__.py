# backend/app/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
All new endpoints should be added here.
"""

from . import (
    account,
    analytics,
    auth,
    booking_types,
    calendar,
    conversations,
    custom_services,
    discounts,
    health,
    messages,
    notifications,
    payments,
    sessions,
    time_slots,
)

__all__ = [
    "account",
    "analytics",
    "auth",
    "booking_types",
    "calendar",
    "conversations",
    "custom_services",
    "discounts",
    "health",
    "messages",
    "notifications",
    "payments",
    "sessions",
    "time_slots",
]
