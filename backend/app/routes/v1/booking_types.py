# backend/app/routes/v1/booking_types.py
"""
Booking type routes - API v1

Versioned booking type endpoints under /api/v1/booking-types.
All business logic delegated to BookingTypeService.

Endpoints:
    GET /                     → Active booking types (public)
    POST /                    → Create (COACH)
    GET /coach/{coach_id}     → A coach's active booking types (public)
    GET /{booking_type_id}    → Booking type (public)
    PATCH /{booking_type_id}  → Update (owning COACH)
    DELETE /{booking_type_id} → Deactivate (owning COACH)
"""

import asyncio
import logging
from typing import List, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status

from ...api.dependencies import get_booking_type_service, require_coach
from ...core.constants import ULID_PATH_PATTERN
from ...core.exceptions import DomainException
from ...models.account import Account
from ...schemas.booking_type import BookingTypeCreate, BookingTypeResponse, BookingTypeUpdate
from ...services.booking_type_service import BookingTypeService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["booking-types-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=List[BookingTypeResponse])
async def list_booking_types(
    service: BookingTypeService = Depends(get_booking_type_service),
) -> List[BookingTypeResponse]:
    booking_types = await asyncio.to_thread(service.list_active)
    return [BookingTypeResponse.model_validate(bt) for bt in booking_types]


@router.post("", response_model=BookingTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_booking_type(
    payload: BookingTypeCreate,
    current_user: Account = Depends(require_coach),
    service: BookingTypeService = Depends(get_booking_type_service),
) -> BookingTypeResponse:
    try:
        booking_type = await asyncio.to_thread(
            service.create_booking_type, current_user, payload.model_dump()
        )
        return BookingTypeResponse.model_validate(booking_type)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/coach/{coach_id}", response_model=List[BookingTypeResponse])
async def list_coach_booking_types(
    coach_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: BookingTypeService = Depends(get_booking_type_service),
) -> List[BookingTypeResponse]:
    booking_types = await asyncio.to_thread(service.list_for_coach, coach_id)
    return [BookingTypeResponse.model_validate(bt) for bt in booking_types]


@router.get("/{booking_type_id}", response_model=BookingTypeResponse)
async def get_booking_type(
    booking_type_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    service: BookingTypeService = Depends(get_booking_type_service),
) -> BookingTypeResponse:
    try:
        booking_type = await asyncio.to_thread(service.get_booking_type, booking_type_id)
        return BookingTypeResponse.model_validate(booking_type)
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{booking_type_id}", response_model=BookingTypeResponse)
async def update_booking_type(
    payload: BookingTypeUpdate,
    booking_type_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(require_coach),
    service: BookingTypeService = Depends(get_booking_type_service),
) -> BookingTypeResponse:
    try:
        booking_type = await asyncio.to_thread(
            service.update_booking_type,
            booking_type_id,
            current_user,
            payload.model_dump(exclude_unset=True),
        )
        return BookingTypeResponse.model_validate(booking_type)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete(
    "/{booking_type_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response
)
async def delete_booking_type(
    booking_type_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(require_coach),
    service: BookingTypeService = Depends(get_booking_type_service),
) -> Response:
    try:
        await asyncio.to_thread(service.delete_booking_type, booking_type_id, current_user)
    except DomainException as e:
        handle_domain_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
