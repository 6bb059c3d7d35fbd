# backend/app/services/account_service.py
"""
Account service for Courtside.

Account CRUD, role changes, public coach listings and role-aware profile
completeness. Non-admin callers can only read or change their own account.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..auth import get_password_hash
from ..core.enums import Role
from ..core.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    RepositoryException,
    ValidationException,
)
from ..models.account import Account
from ..repositories.factory import RepositoryFactory
from ..schemas.account import DISABILITY_CAUSE_REQUIRED
from .base import BaseService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

PROFILE_FIELDS = [
    "gender",
    "age",
    "height",
    "weight",
    "bio",
    "credentials",
    "philosophy",
    "profile_image",
    "disability",
    "disability_cause",
    "country",
    "address",
    "notes",
]

CLIENT_REQUIRED_FIELDS = ["gender", "age", "height", "weight", "country"]

REQUIRED_PROFILE_FIELDS: Dict[Role, List[str]] = {
    Role.USER: CLIENT_REQUIRED_FIELDS,
    Role.PREMIUM_USER: CLIENT_REQUIRED_FIELDS,
    Role.COACH: ["bio", "credentials", "philosophy", "profile_image"],
    Role.ADMIN: [],
}


def required_fields_for(role: Role) -> List[str]:
    return list(REQUIRED_PROFILE_FIELDS.get(role, []))


def optional_fields_for(role: Role) -> List[str]:
    required = set(required_fields_for(role))
    return [field for field in PROFILE_FIELDS if field not in required]


def _is_filled(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


class AccountService(BaseService):
    """Account management operations."""

    def __init__(self, db: Session, notification_service: Optional[NotificationService] = None):
        super().__init__(db)
        self.repository = RepositoryFactory.create_account_repository(db)
        self.booking_type_repository = RepositoryFactory.create_booking_type_repository(db)
        self.notification_service = notification_service or NotificationService(db)

    # Reads

    def list_accounts(self, skip: int = 0, limit: int = 100) -> List[Account]:
        return self.repository.list_accounts(skip=skip, limit=limit)

    def get_account(self, account_id: str) -> Account:
        account = self.repository.get_by_id(account_id, load_relationships=False)
        if account is None:
            raise NotFoundException("Account not found", code="ACCOUNT_NOT_FOUND")
        return account

    def get_visible_account(self, account_id: str, current_user: Account) -> Account:
        """Admins may read any account; everyone else gets their own."""
        if not current_user.is_admin:
            return current_user
        return self.get_account(account_id)

    @BaseService.measure_operation("list_coaches")
    def list_coaches(
        self, country: Optional[str] = None, is_active: Optional[bool] = True
    ) -> List[Dict[str, Any]]:
        coaches = self.repository.list_coaches(country=country, is_active=is_active)
        booking_types = self.booking_type_repository.list_active_for_coaches(c.id for c in coaches)
        by_coach: Dict[str, list] = {}
        for booking_type in booking_types:
            by_coach.setdefault(booking_type.coach_id, []).append(booking_type)
        return [self._coach_payload(coach, by_coach.get(coach.id, [])) for coach in coaches]

    def get_coach(self, coach_id: str) -> Dict[str, Any]:
        coach = self.repository.get_coach(coach_id)
        if coach is None:
            raise NotFoundException("Coach not found", code="COACH_NOT_FOUND")
        return self._coach_payload(coach, self.booking_type_repository.list_by_coach(coach.id))

    @staticmethod
    def _coach_payload(coach: Account, booking_types: list) -> Dict[str, Any]:
        payload = {
            field: getattr(coach, field)
            for field in (
                "id",
                "name",
                "email",
                "bio",
                "credentials",
                "philosophy",
                "profile_image",
                "country",
                "is_active",
                "is_online",
            )
        }
        payload["booking_types"] = booking_types
        return payload

    # Writes

    @BaseService.measure_operation("create_account")
    def create_account(self, data: Dict[str, Any]) -> Account:
        """Admin-side account creation."""
        email = data["email"].lower()
        if self.repository.email_taken(email):
            raise ConflictException("Email already registered", code="EMAIL_EXISTS")
        role: Role = data.get("role") or Role.USER
        if data.get("disability") and not _is_filled(data.get("disability_cause")):
            raise ValidationException(DISABILITY_CAUSE_REQUIRED, code="DISABILITY_CAUSE_REQUIRED")

        values = {field: data[field] for field in PROFILE_FIELDS if data.get(field) is not None}
        with self.transaction():
            account = self.repository.create(
                email=email,
                name=data["name"],
                password_hash=get_password_hash(data["password"]),
                role=role.value,
                **values,
            )
        self.log_operation("create_account", account_id=account.id, role=account.role)
        return account

    @BaseService.measure_operation("update_account")
    def update_account(
        self, account_id: str, data: Dict[str, Any], current_user: Account
    ) -> Account:
        """
        Partial update. Non-admins always update themselves, whatever id they pass.

        Raises:
            ForbiddenException: Non-admin trying to change ``is_active``
            ConflictException: New email already used by another account
            ValidationException: Disability set without a cause
        """
        target = self.get_visible_account(account_id, current_user)
        if "is_active" in data and not current_user.is_admin:
            raise ForbiddenException("Only admins can activate or deactivate accounts")

        updates = dict(data)
        if updates.get("email"):
            updates["email"] = updates["email"].lower()
            if self.repository.email_taken(updates["email"], exclude_id=target.id):
                raise ConflictException("Email already registered", code="EMAIL_EXISTS")
        if updates.get("password"):
            updates["password_hash"] = get_password_hash(updates.pop("password"))
        else:
            updates.pop("password", None)
        self._check_disability(target, updates)

        with self.transaction():
            self.repository.update_entity(target, **updates)
        return target

    def update_profile(
        self, account_id: str, data: Dict[str, Any], current_user: Account
    ) -> Account:
        """Bulk profile update, restricted to profile fields."""
        target = self._profile_target(account_id, current_user)
        updates = {k: v for k, v in data.items() if k in PROFILE_FIELDS or k == "name"}
        self._check_disability(target, updates)
        with self.transaction():
            self.repository.update_entity(target, **updates)
        return target

    def upload_profile_image(
        self, account_id: str, image_url: str, current_user: Account
    ) -> Account:
        target = self._profile_target(account_id, current_user)
        with self.transaction():
            target.profile_image = image_url
        return target

    @BaseService.measure_operation("change_role")
    def change_role(self, account_id: str, role: Role, current_user: Account) -> Account:
        if account_id == current_user.id:
            raise ValidationException("Cannot change your own role", code="SELF_ROLE_CHANGE")
        account = self.get_account(account_id)
        old_role = account.role
        with self.transaction():
            account.role = role.value
        self.logger.info(f"Account {account.id} role changed {old_role} -> {role.value}")
        if old_role != role.value:
            self.notification_service.notify_role_change(account, old_role, current_user.id)
        return account

    @BaseService.measure_operation("delete_account")
    def delete_account(self, account_id: str) -> None:
        with self.transaction():
            try:
                deleted = self.repository.delete(account_id)
            except RepositoryException as exc:
                raise ConflictException(
                    "Account has sessions or messages and cannot be deleted",
                    code="ACCOUNT_IN_USE",
                ) from exc
        if not deleted:
            raise NotFoundException("Account not found", code="ACCOUNT_NOT_FOUND")
        self.log_operation("delete_account", account_id=account_id)

    # Profile completeness

    def _profile_target(self, account_id: str, current_user: Account) -> Account:
        if current_user.is_admin:
            return self.get_account(account_id)
        if account_id != current_user.id:
            raise ForbiddenException("You can only manage your own profile")
        return current_user

    def get_profile_completeness(self, account_id: str, current_user: Account) -> Dict[str, Any]:
        account = self._profile_target(account_id, current_user)
        required = required_fields_for(account.role_enum)
        missing = [field for field in required if not _is_filled(getattr(account, field))]
        if required:
            percentage = round((len(required) - len(missing)) / len(required) * 100)
        else:
            percentage = 100
        return {
            "is_complete": not missing,
            "completion_percentage": percentage,
            "missing_fields": missing,
            "required_fields": required,
        }

    def validate_profile(self, account_id: str, current_user: Account) -> Dict[str, Any]:
        account = self._profile_target(account_id, current_user)
        errors = [
            f"{field} is required for {account.role}"
            for field in required_fields_for(account.role_enum)
            if not _is_filled(getattr(account, field))
        ]
        if account.disability and not _is_filled(account.disability_cause):
            errors.append(DISABILITY_CAUSE_REQUIRED)
        return {"is_valid": not errors, "errors": errors}

    @staticmethod
    def get_role_fields(role: Role) -> Dict[str, Any]:
        return {
            "role": role,
            "required_fields": required_fields_for(role),
            "optional_fields": optional_fields_for(role),
        }

    @staticmethod
    def _check_disability(account: Account, updates: Dict[str, Any]) -> None:
        disability = updates.get("disability", account.disability)
        cause = updates.get("disability_cause", account.disability_cause)
        if disability and not _is_filled(cause):
            raise ValidationException(DISABILITY_CAUSE_REQUIRED, code="DISABILITY_CAUSE_REQUIRED")
