# backend/app/routes/v1/account.py
"""
Account routes - API v1

Versioned account endpoints under /api/v1/accounts.
All business logic delegated to AccountService.

Endpoints (static routes BEFORE dynamic routes):
    GET /                                → List accounts (ADMIN, COACH)
    POST /                               → Create an account (ADMIN)
    GET /me                              → Current account
    GET /coaches                         → Public coach directory
    GET /coaches/{coach_id}              → Public coach profile
    GET /role/{role}/fields              → Required and optional profile fields
    GET /{account_id}                    → Account (non-admins get their own)
    PATCH /{account_id}                  → Update account
    PATCH /{account_id}/role             → Change role (ADMIN)
    DELETE /{account_id}                 → Delete account (ADMIN, COACH)
    GET /{account_id}/profile/completeness
    PATCH /{account_id}/profile/bulk-update
    POST /{account_id}/profile/validate
    POST /{account_id}/profile/upload-image
"""

import asyncio
import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status

from ...api.dependencies import (
    get_account_service,
    get_current_active_user,
    require_admin,
    require_coach_or_admin,
)
from ...core.constants import DEFAULT_QUERY_LIMIT, MAX_QUERY_LIMIT, ULID_PATH_PATTERN
from ...core.enums import Role
from ...core.exceptions import DomainException
from ...models.account import Account
from ...schemas.account import (
    AccountCreate,
    AccountResponse,
    AccountUpdate,
    CoachResponse,
    ProfileCompletenessResponse,
    ProfileImageUpload,
    ProfileUpdate,
    ProfileValidationResponse,
    RoleFieldsResponse,
    RoleUpdate,
)
from ...services.account_service import AccountService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["accounts-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


# ============================================================================
# SECTION 1: Static routes (no path parameters)
# ============================================================================


@router.get("", response_model=List[AccountResponse])
async def list_accounts(
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_QUERY_LIMIT, ge=1, le=MAX_QUERY_LIMIT),
    _: Account = Depends(require_coach_or_admin),
    account_service: AccountService = Depends(get_account_service),
) -> List[AccountResponse]:
    accounts = await asyncio.to_thread(account_service.list_accounts, skip, limit)
    return [AccountResponse.model_validate(account) for account in accounts]


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def create_account(
    payload: AccountCreate,
    _: Account = Depends(require_admin),
    account_service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    try:
        account = await asyncio.to_thread(account_service.create_account, payload.model_dump())
        return AccountResponse.model_validate(account)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/me", response_model=AccountResponse)
async def read_current_account(
    current_user: Account = Depends(get_current_active_user),
) -> AccountResponse:
    return AccountResponse.model_validate(current_user)


@router.get("/coaches", response_model=List[CoachResponse])
async def list_coaches(
    country: Optional[str] = Query(None, max_length=100),
    account_service: AccountService = Depends(get_account_service),
) -> List[CoachResponse]:
    """Public coach directory with each coach's active booking types."""
    coaches = await asyncio.to_thread(account_service.list_coaches, country=country)
    return [CoachResponse.model_validate(coach) for coach in coaches]


@router.get("/coaches/{coach_id}", response_model=CoachResponse)
async def get_coach(
    coach_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    account_service: AccountService = Depends(get_account_service),
) -> CoachResponse:
    try:
        coach = await asyncio.to_thread(account_service.get_coach, coach_id)
        return CoachResponse.model_validate(coach)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/role/{role}/fields", response_model=RoleFieldsResponse)
async def get_role_fields(
    role: Role,
    _: Account = Depends(get_current_active_user),
) -> RoleFieldsResponse:
    return RoleFieldsResponse.model_validate(AccountService.get_role_fields(role))


# ============================================================================
# SECTION 2: Account-specific routes (with {account_id} parameter)
# ============================================================================


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(get_current_active_user),
    account_service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    try:
        account = await asyncio.to_thread(
            account_service.get_visible_account, account_id, current_user
        )
        return AccountResponse.model_validate(account)
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{account_id}", response_model=AccountResponse)
async def update_account(
    payload: AccountUpdate,
    account_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(get_current_active_user),
    account_service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    try:
        account = await asyncio.to_thread(
            account_service.update_account,
            account_id,
            payload.model_dump(exclude_unset=True),
            current_user,
        )
        return AccountResponse.model_validate(account)
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{account_id}/role", response_model=AccountResponse)
async def change_role(
    payload: RoleUpdate,
    account_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(require_admin),
    account_service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    try:
        account = await asyncio.to_thread(
            account_service.change_role, account_id, payload.role, current_user
        )
        return AccountResponse.model_validate(account)
    except DomainException as e:
        handle_domain_exception(e)


@router.delete(
    "/{account_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response
)
async def delete_account(
    account_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    _: Account = Depends(require_coach_or_admin),
    account_service: AccountService = Depends(get_account_service),
) -> Response:
    try:
        await asyncio.to_thread(account_service.delete_account, account_id)
    except DomainException as e:
        handle_domain_exception(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{account_id}/profile/completeness", response_model=ProfileCompletenessResponse)
async def get_profile_completeness(
    account_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(get_current_active_user),
    account_service: AccountService = Depends(get_account_service),
) -> ProfileCompletenessResponse:
    try:
        result = await asyncio.to_thread(
            account_service.get_profile_completeness, account_id, current_user
        )
        return ProfileCompletenessResponse.model_validate(result)
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{account_id}/profile/bulk-update", response_model=AccountResponse)
async def bulk_update_profile(
    payload: ProfileUpdate,
    account_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(get_current_active_user),
    account_service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    try:
        account = await asyncio.to_thread(
            account_service.update_profile,
            account_id,
            payload.model_dump(exclude_unset=True),
            current_user,
        )
        return AccountResponse.model_validate(account)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{account_id}/profile/validate", response_model=ProfileValidationResponse)
async def validate_profile(
    account_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(get_current_active_user),
    account_service: AccountService = Depends(get_account_service),
) -> ProfileValidationResponse:
    try:
        result = await asyncio.to_thread(
            account_service.validate_profile, account_id, current_user
        )
        return ProfileValidationResponse.model_validate(result)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{account_id}/profile/upload-image", response_model=AccountResponse)
async def upload_profile_image(
    payload: ProfileImageUpload,
    account_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: Account = Depends(get_current_active_user),
    account_service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    try:
        account = await asyncio.to_thread(
            account_service.upload_profile_image, account_id, payload.image_url, current_user
        )
        return AccountResponse.model_validate(account)
    except DomainException as e:
        handle_domain_exception(e)
