# backend/app/models/account.py
"""
Account model for the Courtside platform.

A single table holds every kind of account. The ``role`` column decides
whether the account books sessions (USER, PREMIUM_USER), runs them (COACH)
or administers the platform (ADMIN). Coach-only profile fields (bio,
credentials, philosophy) and client-only fields (height, weight, disability)
live side by side and are simply left empty when they do not apply.

Classes:
    Account: Authentication and profile data
    RefreshToken: Issued refresh-token identifiers, revoked on logout/rotation
"""

import logging
from typing import Any, Dict

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import Role
from ..database import Base

logger = logging.getLogger(__name__)


class Account(Base):
    """
    Platform account used for authentication and profile management.

    Attributes:
        id: ULID primary key
        email: Unique email address used for login
        password_hash: Bcrypt hash, never serialized
        role: One of USER, PREMIUM_USER, COACH, ADMIN
        is_active: Inactive accounts cannot log in
        is_online: Toggled on login/logout
    """

    __tablename__ = "accounts"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)

    # Client profile
    gender = Column(String(50), nullable=True)
    age = Column(Integer, nullable=True)
    height = Column(Float, nullable=True)
    weight = Column(Float, nullable=True)
    disability = Column(Boolean, nullable=False, default=False)
    disability_cause = Column(Text, nullable=True)
    country = Column(String(100), nullable=True)
    address = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    # Coach profile
    bio = Column(Text, nullable=True)
    credentials = Column(Text, nullable=True)
    philosophy = Column(Text, nullable=True)
    profile_image = Column(String(1024), nullable=True)

    role = Column(String(20), nullable=False, default=Role.USER.value, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_online = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="account",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint(
            "role IN ('USER', 'PREMIUM_USER', 'COACH', 'ADMIN')",
            name="ck_accounts_role",
        ),
        CheckConstraint("age IS NULL OR age >= 0", name="check_age_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Account {self.id}: {self.email} role={self.role}>"

    @property
    def role_enum(self) -> Role:
        return Role(self.role)

    @property
    def is_coach(self) -> bool:
        return self.role == Role.COACH.value

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @property
    def is_client(self) -> bool:
        return self.role in (Role.USER.value, Role.PREMIUM_USER.value)

    def to_dict(self) -> Dict[str, Any]:
        """Public representation; the password hash is never included."""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "is_active": self.is_active,
            "is_online": self.is_online,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class RefreshToken(Base):
    """Identifier (``jti``) of an issued refresh token."""

    __tablename__ = "refresh_tokens"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    token = Column(String(64), unique=True, nullable=False, index=True)
    account_id = Column(
        String(26), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    account = relationship("Account", back_populates="refresh_tokens")

    def __repr__(self) -> str:
        return f"<RefreshToken {self.id}: account={self.account_id}>"
