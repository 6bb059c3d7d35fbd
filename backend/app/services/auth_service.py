# backend/app/services/auth_service.py
"""
Authentication service for Courtside.

Handles signup, login, refresh-token rotation and logout. Routes stay thin:
they validate input and translate domain exceptions to HTTP responses.
"""

from datetime import datetime, timezone
import logging
from typing import Any, Dict, Optional

from jwt import PyJWTError
from sqlalchemy.orm import Session

from ..auth import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    get_password_hash,
    verify_password,
)
from ..core.enums import Role
from ..core.exceptions import ConflictException, UnauthorizedException, ValidationException
from ..core.timezone_utils import ensure_utc
from ..models.account import Account
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

SIGNUP_ROLES = (Role.USER, Role.COACH)


class AuthService(BaseService):
    """Service for handling authentication operations."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.account_repository = RepositoryFactory.create_account_repository(db)
        self.refresh_token_repository = RepositoryFactory.create_refresh_token_repository(db)

    @BaseService.measure_operation("signup")
    def signup(
        self, email: str, password: str, name: str, role: Optional[Role] = None
    ) -> Dict[str, Any]:
        """
        Register an account and log it in.

        Raises:
            ValidationException: Role other than USER or COACH requested
            ConflictException: Email already registered
        """
        role = role or Role.USER
        if role not in SIGNUP_ROLES:
            raise ValidationException(
                "Only USER or COACH accounts can sign up", code="INVALID_SIGNUP_ROLE"
            )
        if self.account_repository.email_taken(email):
            raise ConflictException("Email already registered", code="EMAIL_EXISTS")

        with self.transaction():
            account = self.account_repository.create(
                email=email.lower(),
                name=name,
                password_hash=get_password_hash(password),
                role=role.value,
                is_online=True,
            )
            tokens = self._issue_tokens(account)

        self.log_operation("signup", account_id=account.id, role=account.role)
        return tokens

    @BaseService.measure_operation("login")
    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Raises:
            UnauthorizedException: Unknown email, wrong password or inactive account
        """
        account = self.account_repository.get_by_email(email)
        if account is None or not verify_password(password, account.password_hash):
            self.logger.info(f"Failed login attempt for {email}")
            raise UnauthorizedException("Invalid credentials", code="INVALID_CREDENTIALS")
        if not account.is_active:
            raise UnauthorizedException("Account is inactive", code="ACCOUNT_INACTIVE")

        with self.transaction():
            account.is_online = True
            tokens = self._issue_tokens(account)
        self.log_operation("login", account_id=account.id)
        return tokens

    @BaseService.measure_operation("refresh")
    def refresh(self, refresh_token: str) -> Dict[str, Any]:
        """Rotate a refresh token: the presented one is revoked, a new pair issued."""
        invalid = UnauthorizedException("Invalid refresh token", code="INVALID_REFRESH_TOKEN")
        try:
            payload = decode_refresh_token(refresh_token)
        except PyJWTError as e:
            self.logger.info(f"Refresh token rejected: {str(e)}")
            raise invalid

        stored = self.refresh_token_repository.get_by_token(payload["jti"])
        if stored is None or stored.account_id != payload["sub"]:
            raise invalid
        if ensure_utc(stored.expires_at) <= datetime.now(timezone.utc):
            raise invalid

        account = self.account_repository.get_by_id(payload["sub"], load_relationships=False)
        if account is None or not account.is_active:
            raise invalid

        with self.transaction():
            self.refresh_token_repository.revoke(payload["jti"])
            tokens = self._issue_tokens(account)
        return tokens

    @BaseService.measure_operation("logout")
    def logout(self, account: Account) -> None:
        """Mark offline and revoke every refresh token of the account."""
        with self.transaction():
            account.is_online = False
            revoked = self.refresh_token_repository.revoke_all_for_account(account.id)
        self.log_operation("logout", account_id=account.id, revoked_tokens=revoked)

    def _issue_tokens(self, account: Account) -> Dict[str, Any]:
        access_token = create_access_token(
            {"sub": account.id, "email": account.email, "role": account.role}
        )
        refresh_token, jti, expires_at = create_refresh_token(account.id)
        self.refresh_token_repository.create(
            token=jti, account_id=account.id, expires_at=expires_at
        )
        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "bearer",
            "account": account,
        }
