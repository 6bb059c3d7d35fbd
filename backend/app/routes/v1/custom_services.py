# backend/app/routes/v1/custom_services.py
"""
Custom service routes - API v1

Versioned custom service endpoints under /api/v1/custom-services.
All business logic delegated to CustomServiceService.

Endpoints:
    POST /                                  → Create (COACH, ADMIN)
    GET /                                   → Visible custom services
    GET /{service_id}                       → Custom service (visibility rules)
    PATCH /{service_id}                     → Update (owner or ADMIN)
    DELETE /{service_id}                    → Delete (owner or ADMIN)
    POST /{service_id}/save-as-template     → Mark as template (owner or ADMIN)
    POST /{service_id}/send-to-user         → Share with a client through chat
"""

import asyncio
import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status

from ...api.dependencies import (
    get_current_active_user,
    get_custom_service_service,
    require_coach_or_admin,
)
from ...core.constants import ULID_PATH_PATTERN
from ...core.exceptions import DomainException
from ...models.account import Account
from ...schemas.common import MessageResponse
from ...schemas.custom_service import (
    CustomServiceCreate,
    CustomServiceResponse,
    CustomServiceUpdate,
    SendToUserRequest,
)
from ...services.custom_service_service import CustomServiceService
from ...services.message_stream import publish_stored_message

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["custom-services-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.post("", response_model=CustomServiceResponse, status_code=status.HTTP_201_CREATED)
async def create_custom_service(
    payload: CustomServiceCreate,
    current_user: Account = Depends(require_coach_or_admin),
    service: CustomServiceService = Depends(get_custom_service_service),
) -> CustomServiceResponse:
    try:
        custom_service = await asyncio.to_thread(
            service.create_custom_service, current_user, payload.model_dump()
        )
        return CustomServiceResponse.model_validate(custom_service)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("", response_model=List[CustomServiceResponse])
async def list_custom_services(
    is_template: Optional[bool] = Query(None),
    is_public: Optional[bool] = Query(None),
    current_user: Account = Depends(get_current_active_user),
    service: CustomServiceService = Depends(get_custom_service_service),
) -> List[CustomServiceResponse]:
    services = await asyncio.to_thread(
        service.list_custom_services,
        current_user,
        is_template=is_template,
        is_public=is_public,
    )
    return [CustomServiceResponse.model_validate(item) for item in services]


@router.get("/{service_id}", response_model=CustomServiceResponse)
async def get_custom_service(
    service_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(get_current_active_user),
    service: CustomServiceService = Depends(get_custom_service_service),
) -> CustomServiceResponse:
    try:
        custom_service = await asyncio.to_thread(
            service.get_custom_service, service_id, current_user
        )
        return CustomServiceResponse.model_validate(custom_service)
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{service_id}", response_model=CustomServiceResponse)
async def update_custom_service(
    payload: CustomServiceUpdate,
    service_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(require_coach_or_admin),
    service: CustomServiceService = Depends(get_custom_service_service),
) -> CustomServiceResponse:
    try:
        custom_service = await asyncio.to_thread(
            service.update_custom_service,
            service_id,
            current_user,
            payload.model_dump(exclude_unset=True),
        )
        return CustomServiceResponse.model_validate(custom_service)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_custom_service(
    service_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(require_coach_or_admin),
    service: CustomServiceService = Depends(get_custom_service_service),
) -> Response:
    try:
        await asyncio.to_thread(service.delete_custom_service, service_id, current_user)
    except DomainException as e:
        handle_domain_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{service_id}/save-as-template", response_model=CustomServiceResponse)
async def save_as_template(
    service_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(require_coach_or_admin),
    service: CustomServiceService = Depends(get_custom_service_service),
) -> CustomServiceResponse:
    try:
        custom_service = await asyncio.to_thread(
            service.save_as_template, service_id, current_user
        )
        return CustomServiceResponse.model_validate(custom_service)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{service_id}/send-to-user", response_model=MessageResponse)
async def send_to_user(
    payload: SendToUserRequest,
    service_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(require_coach_or_admin),
    service: CustomServiceService = Depends(get_custom_service_service),
) -> MessageResponse:
    """
    Share a custom service with a client.

    The chat message and notification are best effort; a failure there is
    logged and the share still counts towards usage.
    """
    try:
        chat_message = await asyncio.to_thread(
            service.send_to_user, service_id, current_user, payload.user_id, payload.message
        )
        if chat_message is not None:
            await publish_stored_message(chat_message)
        return MessageResponse(message=f"Custom service sent to user {payload.user_id}")
    except DomainException as e:
        handle_domain_exception(e)
