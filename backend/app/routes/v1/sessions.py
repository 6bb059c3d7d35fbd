# backend/app/routes/v1/sessions.py
"""
Session routes - API v1

Versioned booking endpoints under /api/v1/sessions.
All business logic delegated to SessionService.

Endpoints (static routes BEFORE dynamic routes):
    POST /                    → Book a time slot
    GET /                     → My sessions (as client or as coach), newest first
    POST /send-reminders      → Send reminders for tomorrow's sessions (ADMIN)
    GET /{session_id}         → Session (participants and ADMIN)
    PATCH /{session_id}       → Update notes, status, payment or calendar ids
    PUT /{session_id}/cancel  → Cancel and release the slot
"""

import asyncio
from datetime import datetime
import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from ...api.dependencies import get_current_active_user, get_session_service, require_admin
from ...core.constants import ULID_PATH_PATTERN
from ...core.enums import SessionStatus
from ...core.exceptions import DomainException
from ...models.account import Account
from ...schemas.session import (
    RemindersSentResponse,
    SessionCreate,
    SessionResponse,
    SessionUpdate,
)
from ...services.session_service import SessionService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["sessions-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


# ============================================================================
# SECTION 1: Static routes (no path parameters)
# ============================================================================


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: SessionCreate,
    current_user: Account = Depends(get_current_active_user),
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """
    Book a time slot.

    Returns:
        The new session; free sessions come back CONFIRMED and paid

    Raises:
        HTTPException: 400 for the pending-booking cap, an invalid booking
            type or an unavailable slot
    """
    try:
        session = await asyncio.to_thread(
            session_service.create_session,
            current_user,
            booking_type_id=payload.booking_type_id,
            time_slot_id=payload.time_slot_id,
            discount_code=payload.discount_code,
            notes=payload.notes,
        )
        return SessionResponse.model_validate(session)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("", response_model=List[SessionResponse])
async def list_sessions(
    status_filter: Optional[SessionStatus] = Query(None, alias="status"),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    current_user: Account = Depends(get_current_active_user),
    session_service: SessionService = Depends(get_session_service),
) -> List[SessionResponse]:
    sessions = await asyncio.to_thread(
        session_service.list_sessions,
        current_user,
        status=status_filter,
        start_date=start_date,
        end_date=end_date,
    )
    return [SessionResponse.model_validate(session) for session in sessions]


@router.post("/send-reminders", response_model=RemindersSentResponse)
async def send_reminders(
    _: Account = Depends(require_admin),
    session_service: SessionService = Depends(get_session_service),
) -> RemindersSentResponse:
    try:
        sent = await asyncio.to_thread(session_service.send_reminders)
        return RemindersSentResponse(sent=sent)
    except DomainException as e:
        handle_domain_exception(e)


# ============================================================================
# SECTION 2: Session-specific routes (with {session_id} parameter)
# ============================================================================


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(get_current_active_user),
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    try:
        session = await asyncio.to_thread(session_service.get_session, session_id, current_user)
        return SessionResponse.model_validate(session)
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{session_id}", response_model=SessionResponse)
async def update_session(
    payload: SessionUpdate,
    session_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(get_current_active_user),
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    try:
        session = await asyncio.to_thread(
            session_service.update_session,
            session_id,
            current_user,
            payload.model_dump(exclude_unset=True),
        )
        return SessionResponse.model_validate(session)
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{session_id}/cancel", response_model=SessionResponse)
async def cancel_session(
    session_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(get_current_active_user),
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    try:
        session = await asyncio.to_thread(
            session_service.cancel_session, session_id, current_user
        )
        return SessionResponse.model_validate(session)
    except DomainException as e:
        handle_domain_exception(e)
