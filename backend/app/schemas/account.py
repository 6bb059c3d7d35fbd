"""
Account schemas.

Requests accept the full profile; responses never include the password hash.
"""

from typing import List, Optional

from pydantic import EmailStr, Field

from ..core.enums import Role
from .base import Money, StandardizedModel, StrictRequestModel, UtcDateTime

DISABILITY_CAUSE_REQUIRED = "disabilityCause is required when disability is true"


class ProfileFields(StrictRequestModel):
    """Profile fields shared by create, update and bulk profile update."""

    gender: Optional[str] = Field(None, max_length=50)
    age: Optional[int] = Field(None, ge=0, le=120)
    height: Optional[float] = Field(None, gt=0)
    weight: Optional[float] = Field(None, gt=0)
    bio: Optional[str] = None
    credentials: Optional[str] = None
    philosophy: Optional[str] = None
    profile_image: Optional[str] = Field(None, max_length=1024)
    disability: Optional[bool] = None
    disability_cause: Optional[str] = None
    country: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = None
    notes: Optional[str] = None


class AccountCreate(ProfileFields):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    name: str = Field(..., min_length=1, max_length=255)
    role: Role = Role.USER


class AccountUpdate(ProfileFields):
    """Partial update; the disability rule is checked against stored values too."""

    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8, max_length=128)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    is_active: Optional[bool] = None


class ProfileUpdate(ProfileFields):
    name: Optional[str] = Field(None, min_length=1, max_length=255)


class RoleUpdate(StrictRequestModel):
    role: Role


class ProfileImageUpload(StrictRequestModel):
    image_url: str = Field(..., min_length=1, max_length=1024)


class AccountResponse(StandardizedModel):
    id: str
    email: str
    name: str
    role: Role
    gender: Optional[str] = None
    age: Optional[int] = None
    height: Optional[float] = None
    weight: Optional[float] = None
    bio: Optional[str] = None
    credentials: Optional[str] = None
    philosophy: Optional[str] = None
    profile_image: Optional[str] = None
    disability: bool = False
    disability_cause: Optional[str] = None
    country: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool
    is_online: bool
    created_at: UtcDateTime
    updated_at: UtcDateTime


class AccountBrief(StandardizedModel):
    id: str
    name: str
    email: str
    role: Role


class CoachBookingType(StandardizedModel):
    id: str
    name: str
    description: Optional[str] = None
    base_price: Money


class CoachResponse(StandardizedModel):
    """Public coach profile with active booking types."""

    id: str
    name: str
    email: str
    bio: Optional[str] = None
    credentials: Optional[str] = None
    philosophy: Optional[str] = None
    profile_image: Optional[str] = None
    country: Optional[str] = None
    is_active: bool
    is_online: bool
    booking_types: List[CoachBookingType] = Field(default_factory=list)


class ProfileCompletenessResponse(StandardizedModel):
    is_complete: bool
    completion_percentage: int = Field(..., ge=0, le=100)
    missing_fields: List[str]
    required_fields: List[str]


class ProfileValidationResponse(StandardizedModel):
    is_valid: bool
    errors: List[str]


class RoleFieldsResponse(StandardizedModel):
    role: Role
    required_fields: List[str]
    optional_fields: List[str]
