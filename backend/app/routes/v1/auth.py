# backend/app/routes/v1/auth.py
"""
Auth routes - API v1

Versioned authentication endpoints under /api/v1/auth.
All business logic delegated to AuthService.

Endpoints:
    POST /signup   → Register a USER or COACH account and log it in
    POST /login    → Exchange email and password for a token pair
    POST /refresh  → Rotate a refresh token
    POST /logout   → Go offline and revoke every refresh token
"""

import asyncio
import logging
from typing import Any, Dict, NoReturn

from fastapi import APIRouter, Depends, HTTPException, status

from ...api.dependencies import get_auth_service, get_current_user
from ...core.exceptions import DomainException
from ...models.account import Account
from ...schemas.auth import AuthResponse, LoginRequest, RefreshRequest, SignupRequest
from ...schemas.common import MessageResponse
from ...services.auth_service import AuthService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["auth-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


def _auth_response(tokens: Dict[str, Any]) -> AuthResponse:
    return AuthResponse.model_validate(tokens)


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    payload: SignupRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Register a new account. ADMIN accounts cannot be self-registered."""
    try:
        tokens = await asyncio.to_thread(
            auth_service.signup,
            email=payload.email,
            password=payload.password,
            name=payload.name,
            role=payload.role,
        )
        return _auth_response(tokens)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    try:
        tokens = await asyncio.to_thread(auth_service.login, payload.email, payload.password)
        return _auth_response(tokens)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/refresh", response_model=AuthResponse)
async def refresh(
    payload: RefreshRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    try:
        tokens = await asyncio.to_thread(auth_service.refresh, payload.refresh_token)
        return _auth_response(tokens)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    current_user: Account = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    try:
        await asyncio.to_thread(auth_service.logout, current_user)
    except DomainException as e:
        handle_domain_exception(e)
    return MessageResponse(message="Logged out successfully")
