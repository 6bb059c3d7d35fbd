# backend/app/core/exceptions.py
"""
Domain-specific exceptions for the Courtside platform.

Services raise these; routes turn them into HTTP errors with
``to_http_exception()``, which carries ``{message, code, details}`` as the
detail payload. Each subclass only chooses its status code.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """A business rule rejected the request."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """The request clashes with existing data."""

    status_code = status.HTTP_409_CONFLICT


class UnauthorizedException(DomainException):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenException(DomainException):
    """The caller is authenticated but may not perform the action."""

    status_code = status.HTTP_403_FORBIDDEN


class ServiceException(DomainException):
    """A service operation failed for reasons outside the caller's control."""


class BadGatewayException(DomainException):
    """An upstream provider (payment gateway, email) failed."""

    status_code = status.HTTP_502_BAD_GATEWAY


# Specific business exceptions


class SlotUnavailableException(ValidationException):
    """Raised when a time slot can no longer be booked."""

    def __init__(self, time_slot_id: Optional[str] = None):
        super().__init__(
            message="Time slot not available",
            code="SLOT_UNAVAILABLE",
            details={"time_slot_id": time_slot_id} if time_slot_id else {},
        )


class PendingBookingLimitException(ValidationException):
    """Raised when a user already holds the maximum number of unpaid bookings."""

    def __init__(self, limit: int, pending: int):
        super().__init__(
            message=f"Maximum of {limit} pending bookings allowed",
            code="PENDING_BOOKING_LIMIT",
            details={"limit": limit, "pending": pending},
        )


class SlotOverlapException(ConflictException):
    """Raised when a new time slot overlaps one the coach already published."""

    def __init__(self, new_range: str, conflicting_range: str):
        super().__init__(
            message=f"Time slot {new_range} overlaps existing slot {conflicting_range}",
            code="SLOT_OVERLAP",
            details={"new_slot": new_range, "conflicting_slot": conflicting_range},
        )


class RepositoryException(Exception):
    """Data access failed: connection problems, bad queries or constraint violations."""
