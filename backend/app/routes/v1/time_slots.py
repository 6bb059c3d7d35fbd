# backend/app/routes/v1/time_slots.py
"""
Time slot routes - API v1

Versioned time slot endpoints under /api/v1/time-slots.
All business logic delegated to TimeSlotService.

Endpoints:
    GET /                   → Available slots, filtered by date range and coach (public)
    POST /                  → Publish a slot (COACH)
    GET /coach/{coach_id}   → All of a coach's slots (public)
    GET /{slot_id}          → Slot (public)
    PATCH /{slot_id}        → Update (owning COACH)
    DELETE /{slot_id}       → Delete unless an active session holds it (owning COACH)
"""

import asyncio
from datetime import datetime
import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status

from ...api.dependencies import get_time_slot_service, require_coach
from ...core.constants import ULID_PATH_PATTERN
from ...core.exceptions import DomainException
from ...models.account import Account
from ...schemas.time_slot import TimeSlotCreate, TimeSlotResponse, TimeSlotUpdate
from ...services.time_slot_service import TimeSlotService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["time-slots-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=List[TimeSlotResponse])
async def list_available_time_slots(
    start_date: Optional[datetime] = Query(None, description="Defaults to now"),
    end_date: Optional[datetime] = Query(None),
    coach_id: Optional[str] = Query(None, pattern=ULID_PATH_PATTERN),
    service: TimeSlotService = Depends(get_time_slot_service),
) -> List[TimeSlotResponse]:
    slots = await asyncio.to_thread(service.list_available, start_date, end_date, coach_id)
    return [TimeSlotResponse.model_validate(slot) for slot in slots]


@router.post("", response_model=TimeSlotResponse, status_code=status.HTTP_201_CREATED)
async def create_time_slot(
    payload: TimeSlotCreate,
    current_user: Account = Depends(require_coach),
    service: TimeSlotService = Depends(get_time_slot_service),
) -> TimeSlotResponse:
    try:
        slot = await asyncio.to_thread(service.create_time_slot, current_user, payload.model_dump())
        return TimeSlotResponse.model_validate(slot)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/coach/{coach_id}", response_model=List[TimeSlotResponse])
async def list_coach_time_slots(
    coach_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: TimeSlotService = Depends(get_time_slot_service),
) -> List[TimeSlotResponse]:
    slots = await asyncio.to_thread(service.list_for_coach, coach_id)
    return [TimeSlotResponse.model_validate(slot) for slot in slots]


@router.get("/{slot_id}", response_model=TimeSlotResponse)
async def get_time_slot(
    slot_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: TimeSlotService = Depends(get_time_slot_service),
) -> TimeSlotResponse:
    try:
        slot = await asyncio.to_thread(service.get_time_slot, slot_id)
        return TimeSlotResponse.model_validate(slot)
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{slot_id}", response_model=TimeSlotResponse)
async def update_time_slot(
    payload: TimeSlotUpdate,
    slot_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(require_coach),
    service: TimeSlotService = Depends(get_time_slot_service),
) -> TimeSlotResponse:
    try:
        slot = await asyncio.to_thread(
            service.update_time_slot, slot_id, current_user, payload.model_dump(exclude_unset=True)
        )
        return TimeSlotResponse.model_validate(slot)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{slot_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_time_slot(
    slot_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(require_coach),
    service: TimeSlotService = Depends(get_time_slot_service),
) -> Response:
    try:
        await asyncio.to_thread(service.delete_time_slot, slot_id, current_user)
    except DomainException as e:
        handle_domain_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
