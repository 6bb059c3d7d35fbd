# backend/app/routes/v1/discounts.py
"""
Discount routes - API v1

Versioned discount code endpoints under /api/v1/discounts.
All business logic delegated to DiscountService.

Endpoints:
    GET /coach        → My discount codes (COACH)
    POST /validate    → Check a code before booking
    POST /            → Create a code (COACH, ADMIN)
    PUT /{code}       → Update a code (owner)
    DELETE /{code}    → Deactivate a code (owner)
"""

import asyncio
import logging
from typing import List, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status

from ...api.dependencies import (
    get_current_active_user,
    get_discount_service,
    require_coach,
    require_coach_or_admin,
)
from ...core.exceptions import DomainException
from ...models.account import Account
from ...schemas.discount import (
    DiscountCreate,
    DiscountResponse,
    DiscountUpdate,
    DiscountValidateRequest,
    DiscountValidateResponse,
)
from ...services.discount_service import DiscountService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["discounts-v1"])

CODE_PATH_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("/coach", response_model=List[DiscountResponse])
async def list_my_discounts(
    current_user: Account = Depends(require_coach),
    discount_service: DiscountService = Depends(get_discount_service),
) -> List[DiscountResponse]:
    discounts = await asyncio.to_thread(discount_service.list_for_coach, current_user)
    return [DiscountResponse.model_validate(discount) for discount in discounts]


@router.post("/validate", response_model=DiscountValidateResponse)
async def validate_discount(
    payload: DiscountValidateRequest,
    _: Account = Depends(get_current_active_user),
    discount_service: DiscountService = Depends(get_discount_service),
) -> DiscountValidateResponse:
    try:
        result = await asyncio.to_thread(
            discount_service.validate_code, payload.code, payload.coach_id
        )
        return DiscountValidateResponse.model_validate(result)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("", response_model=DiscountResponse, status_code=status.HTTP_201_CREATED)
async def create_discount(
    payload: DiscountCreate,
    current_user: Account = Depends(require_coach_or_admin),
    discount_service: DiscountService = Depends(get_discount_service),
) -> DiscountResponse:
    try:
        discount = await asyncio.to_thread(
            discount_service.create_discount, current_user, payload.model_dump()
        )
        return DiscountResponse.model_validate(discount)
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{code}", response_model=DiscountResponse)
async def update_discount(
    payload: DiscountUpdate,
    code: str = Path(..., pattern=CODE_PATH_PATTERN),
    current_user: Account = Depends(require_coach_or_admin),
    discount_service: DiscountService = Depends(get_discount_service),
) -> DiscountResponse:
    try:
        discount = await asyncio.to_thread(
            discount_service.update_discount,
            code,
            current_user,
            payload.model_dump(exclude_unset=True),
        )
        return DiscountResponse.model_validate(discount)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{code}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_discount(
    code: str = Path(..., pattern=CODE_PATH_PATTERN),
    current_user: Account = Depends(require_coach_or_admin),
    discount_service: DiscountService = Depends(get_discount_service),
) -> Response:
    try:
        await asyncio.to_thread(discount_service.delete_discount, code, current_user)
    except DomainException as e:
        handle_domain_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
