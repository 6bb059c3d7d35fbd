"""Application-wide constants for the Courtside platform."""

from __future__ import annotations

BRAND_NAME = "Courtside"

API_TITLE = f"{BRAND_NAME} API"
API_DESCRIPTION = "Tennis coaching booking platform: coaches, slots, sessions, payments and chat."
API_VERSION = "1.0.0"

# Session constraints
MIN_SLOT_DURATION = 15  # minutes
DEFAULT_SESSION_DURATION = 60  # minutes

# Query limits
DEFAULT_QUERY_LIMIT = 100
MAX_QUERY_LIMIT = 1000
DEFAULT_MESSAGE_PAGE_SIZE = 50
DEFAULT_NOTIFICATION_PAGE_SIZE = 50

# Analytics
TOP_BOOKING_TYPES_LIMIT = 5

# Messaging
CUSTOM_SERVICE_SHARE_TEMPLATE = "I've shared a custom service with you: {name}"

# Frontend paths
PAYMENT_SUCCESS_PATH = "/payment/success"
PAYMENT_CANCEL_PATH = "/payment/cancel"

ULID_PATH_PATTERN = r"^[0-9A-HJKMNP-TV-Z]{26}$"
