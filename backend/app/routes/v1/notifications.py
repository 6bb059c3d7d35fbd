# backend/app/routes/v1/notifications.py
"""
Notification routes - API v1

Versioned notification endpoints under /api/v1/notifications.
All business logic delegated to NotificationService.

Endpoints (static routes BEFORE dynamic routes):
    GET /                       → My notifications (paginated)
    GET /unread-count           → Unread notification count
    PATCH /mark-all-read        → Mark all as read
    POST /announcement          → System announcement (ADMIN)
    POST /email                 → Send an email through the configured provider (ADMIN)
    POST /confirm               → Re-send a booking confirmation
    PATCH /{notification_id}/read → Mark one as read
    DELETE /{notification_id}   → Delete one
"""

import asyncio
import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status

from ...api.dependencies import get_current_active_user, get_notification_service, require_admin
from ...core.constants import DEFAULT_NOTIFICATION_PAGE_SIZE, ULID_PATH_PATTERN
from ...core.enums import NotificationType
from ...core.exceptions import DomainException
from ...models.account import Account
from ...schemas.common import CountResponse
from ...schemas.notification import (
    AnnouncementRequest,
    AnnouncementResponse,
    ConfirmBookingRequest,
    MarkedCountResponse,
    NotificationListResponse,
    NotificationResponse,
    SendEmailRequest,
    SendEmailResponse,
)
from ...services.notification_service import NotificationService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["notifications-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


# ============================================================================
# SECTION 1: Static routes (no path parameters)
# ============================================================================


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    limit: int = Query(DEFAULT_NOTIFICATION_PAGE_SIZE, ge=1, le=100),
    offset: int = Query(0, ge=0),
    unread_only: bool = Query(False),
    notification_type: Optional[NotificationType] = Query(None, alias="type"),
    current_user: Account = Depends(get_current_active_user),
    notification_service: NotificationService = Depends(get_notification_service),
) -> NotificationListResponse:
    notifications, total = await asyncio.to_thread(
        notification_service.list_notifications,
        current_user.id,
        limit,
        offset,
        unread_only,
        notification_type,
    )
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/unread-count", response_model=CountResponse)
async def get_unread_count(
    current_user: Account = Depends(get_current_active_user),
    notification_service: NotificationService = Depends(get_notification_service),
) -> CountResponse:
    count = await asyncio.to_thread(notification_service.get_unread_count, current_user.id)
    return CountResponse(count=count)


@router.patch("/mark-all-read", response_model=MarkedCountResponse)
async def mark_all_read(
    current_user: Account = Depends(get_current_active_user),
    notification_service: NotificationService = Depends(get_notification_service),
) -> MarkedCountResponse:
    try:
        marked = await asyncio.to_thread(notification_service.mark_all_as_read, current_user.id)
        return MarkedCountResponse(marked_count=marked)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/announcement", response_model=AnnouncementResponse)
async def send_announcement(
    payload: AnnouncementRequest,
    current_user: Account = Depends(require_admin),
    notification_service: NotificationService = Depends(get_notification_service),
) -> AnnouncementResponse:
    try:
        recipients = await asyncio.to_thread(
            notification_service.send_system_announcement,
            payload.title,
            payload.message,
            target_roles=payload.target_roles,
            priority=payload.priority,
            sender_id=current_user.id,
        )
        return AnnouncementResponse(message="Announcement sent", recipients=recipients)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/email", response_model=SendEmailResponse)
async def send_email(
    payload: SendEmailRequest,
    current_user: Account = Depends(require_admin),
    notification_service: NotificationService = Depends(get_notification_service),
) -> SendEmailResponse:
    try:
        result = await asyncio.to_thread(
            notification_service.send_email,
            payload.to,
            payload.subject,
            payload.html,
            payload.text,
        )
        return SendEmailResponse(**result)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/confirm", response_model=NotificationResponse)
async def confirm_booking(
    payload: ConfirmBookingRequest,
    current_user: Account = Depends(get_current_active_user),
    notification_service: NotificationService = Depends(get_notification_service),
) -> NotificationResponse:
    try:
        notification = await asyncio.to_thread(
            notification_service.confirm_booking, payload.session_id, current_user
        )
        return NotificationResponse.model_validate(notification)
    except DomainException as e:
        handle_domain_exception(e)


# ============================================================================
# SECTION 2: Notification-specific routes (with {notification_id} parameter)
# ============================================================================


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(get_current_active_user),
    notification_service: NotificationService = Depends(get_notification_service),
) -> NotificationResponse:
    try:
        notification = await asyncio.to_thread(
            notification_service.mark_as_read, notification_id, current_user.id
        )
        return NotificationResponse.model_validate(notification)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete(
    "/{notification_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response
)
async def delete_notification(
    notification_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(get_current_active_user),
    notification_service: NotificationService = Depends(get_notification_service),
) -> Response:
    try:
        await asyncio.to_thread(
            notification_service.delete_notification, notification_id, current_user.id
        )
    except DomainException as e:
        handle_domain_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
