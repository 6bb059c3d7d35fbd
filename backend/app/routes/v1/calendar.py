# backend/app/routes/v1/calendar.py
"""
Calendar routes - API v1

Endpoints:
    POST /events              → Create a calendar event for a session (participants)
    DELETE /events/{event_id} → Remove the event (participants)
"""

import asyncio
import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status

from ...api.dependencies import get_calendar_service, get_current_active_user
from ...core.exceptions import DomainException
from ...models.account import Account
from ...schemas.calendar import CalendarEventRequest, CalendarEventResponse
from ...services.calendar_service import CalendarService

logger = logging.getLogger(__name__)

EVENT_ID_PATTERN = r"^event_[0-9a-z]{26}$"

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["calendar-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.post("/events", response_model=CalendarEventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: CalendarEventRequest,
    current_user: Account = Depends(get_current_active_user),
    calendar_service: CalendarService = Depends(get_calendar_service),
) -> CalendarEventResponse:
    try:
        event = await asyncio.to_thread(
            calendar_service.create_event, payload.session_id, current_user
        )
        return CalendarEventResponse.model_validate(event)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete(
    "/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response
)
async def delete_event(
    event_id: str = Path(..., pattern=EVENT_ID_PATTERN),
    current_user: Account = Depends(get_current_active_user),
    calendar_service: CalendarService = Depends(get_calendar_service),
) -> Response:
    try:
        await asyncio.to_thread(calendar_service.delete_event, event_id, current_user)
    except DomainException as e:
        handle_domain_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
