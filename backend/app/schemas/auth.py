"""Authentication request and response schemas."""

from typing import Optional

from pydantic import EmailStr, Field

from ..core.enums import Role
from .base import StandardizedModel, StrictRequestModel


class SignupRequest(StrictRequestModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    name: str = Field(..., min_length=1, max_length=255)
    role: Optional[Role] = Field(None, description="USER (default) or COACH")


class LoginRequest(StrictRequestModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(StrictRequestModel):
    refresh_token: str = Field(..., min_length=1)


class TokenAccount(StandardizedModel):
    id: str
    email: str
    name: str
    role: Role


class AuthResponse(StandardizedModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    account: TokenAccount
