# backend/app/routes/v1/messages.py
"""
Messages routes - API v1

Versioned message endpoints under /api/v1/messages.
All business logic delegated to MessageService.

Endpoints (static routes BEFORE dynamic routes):
    POST /                                → Send a message
    GET /                                 → My messages, newest first
    GET /unread-count                     → Unread messages addressed to me
    GET /stream                           → Live messages for me (SSE)
    POST /booking-request                 → Ask a coach for a booking type
    GET /conversation/{other_user_id}     → Messages with one account, oldest first
    GET /session/{session_id}             → Messages about a session (participants)
    GET /session/{session_id}/stream      → Live messages about a session (SSE)
    GET /{message_id}                     → Message (participants)
    PUT /{message_id}/read                → Mark read (receiver)
"""

import asyncio
import logging
from typing import List, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sse_starlette.sse import EventSourceResponse

from ...api.dependencies import (
    get_current_active_user,
    get_current_user_sse,
    get_message_service,
)
from ...core.config import settings
from ...core.constants import DEFAULT_MESSAGE_PAGE_SIZE, ULID_PATH_PATTERN
from ...core.exceptions import DomainException
from ...models.account import Account
from ...schemas.common import CountResponse
from ...schemas.message import (
    BookingRequestCreate,
    MessageCreate,
    MessageResponse,
    PaginatedMessagesResponse,
)
from ...services.message_service import MessageService
from ...services.message_stream import (
    publish_stored_message,
    session_channel,
    stream_channel,
    user_channel,
)

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["messages-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


SSE_HEADERS = {"Cache-Control": "no-cache", "X-Accel-Buffering": "no"}


def _event_stream(channel: str) -> EventSourceResponse:
    return EventSourceResponse(
        stream_channel(channel), ping=settings.sse_ping_seconds, headers=SSE_HEADERS
    )


# ============================================================================
# SECTION 1: Static routes (no path parameters)
# ============================================================================


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    payload: MessageCreate,
    current_user: Account = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service),
) -> MessageResponse:
    try:
        message = await asyncio.to_thread(
            message_service.send_message,
            current_user,
            payload.receiver_id,
            payload.content,
            session_id=payload.session_id,
            message_type=payload.message_type,
            custom_service_id=payload.custom_service_id,
        )
        return await publish_stored_message(message)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("", response_model=List[MessageResponse])
async def list_messages(
    current_user: Account = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service),
) -> List[MessageResponse]:
    messages = await asyncio.to_thread(message_service.list_messages, current_user)
    return [MessageResponse.model_validate(message) for message in messages]


@router.get("/unread-count", response_model=CountResponse)
async def get_unread_count(
    current_user: Account = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service),
) -> CountResponse:
    count = await asyncio.to_thread(message_service.get_unread_count, current_user)
    return CountResponse(count=count)


@router.get("/stream")
async def stream_my_messages(
    current_user: Account = Depends(get_current_user_sse),
) -> EventSourceResponse:
    """Server-Sent Events: every message sent to or by the caller, as it is stored."""
    logger.info(f"[SSE] Inbox stream opened by {current_user.id}")
    return _event_stream(user_channel(current_user.id))


@router.post(
    "/booking-request", response_model=MessageResponse, status_code=status.HTTP_201_CREATED
)
async def send_booking_request(
    payload: BookingRequestCreate,
    current_user: Account = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service),
) -> MessageResponse:
    try:
        message = await asyncio.to_thread(
            message_service.send_booking_request,
            current_user,
            payload.coach_id,
            payload.booking_type_id,
            payload.message,
        )
        return await publish_stored_message(message)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/conversation/{other_user_id}", response_model=List[MessageResponse])
async def list_conversation_with(
    other_user_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service),
) -> List[MessageResponse]:
    messages = await asyncio.to_thread(message_service.list_with, current_user, other_user_id)
    return [MessageResponse.model_validate(message) for message in messages]


@router.get("/session/{session_id}", response_model=PaginatedMessagesResponse)
async def list_session_messages(
    session_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_MESSAGE_PAGE_SIZE, ge=1, le=100),
    current_user: Account = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service),
) -> PaginatedMessagesResponse:
    try:
        result = await asyncio.to_thread(
            message_service.list_for_session, session_id, current_user, page, limit
        )
        return PaginatedMessagesResponse.model_validate(result)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/session/{session_id}/stream")
async def stream_session_messages(
    session_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(get_current_user_sse),
    message_service: MessageService = Depends(get_message_service),
) -> EventSourceResponse:
    """Server-Sent Events: messages attached to one session (participants only)."""
    try:
        await asyncio.to_thread(message_service.ensure_session_access, session_id, current_user)
    except DomainException as e:
        handle_domain_exception(e)
    logger.info(f"[SSE] Session {session_id} stream opened by {current_user.id}")
    return _event_stream(session_channel(session_id))


# ============================================================================
# SECTION 2: Message-specific routes (with {message_id} parameter)
# ============================================================================


@router.get("/{message_id}", response_model=MessageResponse)
async def get_message(
    message_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service),
) -> MessageResponse:
    try:
        message = await asyncio.to_thread(message_service.get_message, message_id, current_user)
        return MessageResponse.model_validate(message)
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{message_id}/read", response_model=MessageResponse)
async def mark_message_read(
    message_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(get_current_active_user),
    message_service: MessageService = Depends(get_message_service),
) -> MessageResponse:
    try:
        message = await asyncio.to_thread(message_service.mark_read, message_id, current_user)
        return MessageResponse.model_validate(message)
    except DomainException as e:
        handle_domain_exception(e)
