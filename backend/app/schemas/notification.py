"""Notification inbox and outbound email schemas."""

from typing import Any, Dict, List, Optional

from pydantic import EmailStr, Field

from ..core.enums import NotificationPriority, NotificationType, Role
from .base import StandardizedModel, StrictRequestModel, UtcDateTime


class NotificationResponse(StandardizedModel):
    id: str
    type: NotificationType
    title: str
    message: str
    recipient_id: str
    sender_id: Optional[str] = None
    priority: NotificationPriority
    channels: List[str]
    data: Optional[Dict[str, Any]] = None
    is_read: bool
    read_at: Optional[UtcDateTime] = None
    scheduled_for: Optional[UtcDateTime] = None
    sent_at: Optional[UtcDateTime] = None
    created_at: UtcDateTime


class NotificationListResponse(StandardizedModel):
    notifications: List[NotificationResponse]
    total: int
    limit: int
    offset: int


class MarkedCountResponse(StandardizedModel):
    marked_count: int


class AnnouncementRequest(StrictRequestModel):
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    target_roles: Optional[List[Role]] = None
    priority: NotificationPriority = NotificationPriority.MEDIUM


class AnnouncementResponse(StandardizedModel):
    message: str
    recipients: int


class SendEmailRequest(StrictRequestModel):
    to: EmailStr
    subject: str = Field(..., min_length=1, max_length=255)
    html: str = Field(..., min_length=1)
    text: Optional[str] = None


class SendEmailResponse(StandardizedModel):
    success: bool
    message_id: Optional[str] = None


class ConfirmBookingRequest(StrictRequestModel):
    session_id: str = Field(..., min_length=1)
