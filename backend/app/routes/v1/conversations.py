# backend/app/routes/v1/conversations.py
"""
Conversation routes - API v1

Versioned conversation endpoints under /api/v1/conversations.
All business logic delegated to ConversationService.

Endpoints:
    GET /                               → My conversations, pinned first
    GET /{conversation_id}              → Conversation (participants and ADMIN)
    PUT /{conversation_id}/pin          → Pin (participating COACH or ADMIN)
    PUT /{conversation_id}/unpin        → Unpin (participating COACH or ADMIN)
    GET /{conversation_id}/messages     → Messages, oldest first, paginated
    PUT /{conversation_id}/read         → Mark everything addressed to me read
"""

import asyncio
import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from ...api.dependencies import get_conversation_service, get_current_active_user
from ...core.constants import DEFAULT_MESSAGE_PAGE_SIZE, ULID_PATH_PATTERN
from ...core.exceptions import DomainException
from ...models.account import Account
from ...schemas.conversation import ConversationReadResponse, ConversationResponse
from ...schemas.message import PaginatedMessagesResponse
from ...services.conversation_service import ConversationService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["conversations-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=List[ConversationResponse])
async def list_conversations(
    is_pinned: Optional[bool] = Query(None),
    current_user: Account = Depends(get_current_active_user),
    service: ConversationService = Depends(get_conversation_service),
) -> List[ConversationResponse]:
    conversations = await asyncio.to_thread(
        service.list_conversations, current_user, is_pinned=is_pinned
    )
    return [ConversationResponse.model_validate(item) for item in conversations]


@router.get("/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(
    conversation_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(get_current_active_user),
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationResponse:
    try:
        result = await asyncio.to_thread(service.get_conversation, conversation_id, current_user)
        return ConversationResponse.model_validate(result)
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{conversation_id}/pin", response_model=ConversationResponse)
async def pin_conversation(
    conversation_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(get_current_active_user),
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationResponse:
    try:
        result = await asyncio.to_thread(service.pin, conversation_id, current_user)
        return ConversationResponse.model_validate(result)
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{conversation_id}/unpin", response_model=ConversationResponse)
async def unpin_conversation(
    conversation_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(get_current_active_user),
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationResponse:
    try:
        result = await asyncio.to_thread(service.unpin, conversation_id, current_user)
        return ConversationResponse.model_validate(result)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{conversation_id}/messages", response_model=PaginatedMessagesResponse)
async def list_conversation_messages(
    conversation_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_MESSAGE_PAGE_SIZE, ge=1, le=100),
    current_user: Account = Depends(get_current_active_user),
    service: ConversationService = Depends(get_conversation_service),
) -> PaginatedMessagesResponse:
    try:
        result = await asyncio.to_thread(
            service.list_messages, conversation_id, current_user, page, limit
        )
        return PaginatedMessagesResponse.model_validate(result)
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{conversation_id}/read", response_model=ConversationReadResponse)
async def mark_conversation_read(
    conversation_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(get_current_active_user),
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationReadResponse:
    try:
        updated = await asyncio.to_thread(service.mark_read, conversation_id, current_user)
        return ConversationReadResponse(updated_count=updated)
    except DomainException as e:
        handle_domain_exception(e)
