# backend/app/api/dependencies/auth.py
"""
Authentication and authorization dependencies.

``get_current_user`` resolves the bearer token to an ``Account``;
``require_roles`` builds a dependency that only lets the listed roles in.
"""

import logging
from typing import Awaitable, Callable, Optional

from fastapi import Depends, HTTPException, Query, status
from jwt import PyJWTError
from sqlalchemy.orm import Session

from ...auth import decode_access_token, oauth2_scheme
from ...core.enums import Role
from ...models.account import Account
from ...repositories.factory import RepositoryFactory
from .database import get_db

logger = logging.getLogger(__name__)


def _credentials_exception(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Account:
    """
    Resolve the bearer token to the calling account.

    Raises:
        HTTPException: 401 when the token is missing, invalid or expired,
            or the account no longer exists
    """
    return _resolve_account(token, db)


async def get_current_user_sse(
    token: Optional[str] = Depends(oauth2_scheme),
    query_token: Optional[str] = Query(None, alias="token"),
    db: Session = Depends(get_db),
) -> Account:
    """
    Like ``get_current_active_user`` for event streams.

    Browsers' EventSource cannot set headers, so the access token may also
    arrive as the ``token`` query parameter.
    """
    account = _resolve_account(token or query_token, db)
    if not account.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return account


def _resolve_account(token: Optional[str], db: Session) -> Account:
    if not token:
        raise _credentials_exception("Not authenticated")

    try:
        payload = decode_access_token(token)
    except PyJWTError as e:
        logger.warning(f"JWT validation error: {str(e)}")
        raise _credentials_exception("Could not validate credentials")

    account = RepositoryFactory.create_account_repository(db).get_by_id(
        payload["sub"], load_relationships=False
    )
    if account is None:
        logger.warning(f"Token references unknown account {payload['sub']}")
        raise _credentials_exception("Could not validate credentials")
    return account


async def get_current_active_user(
    current_user: Account = Depends(get_current_user),
) -> Account:
    """Reject deactivated accounts."""
    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return current_user


def require_roles(*roles: Role) -> Callable[..., Awaitable[Account]]:
    """
    Dependency factory restricting an endpoint to the given roles.

    Usage:
        @router.post("", dependencies=[Depends(require_roles(Role.COACH))])
    """
    allowed = {role.value for role in roles}

    async def role_checker(current_user: Account = Depends(get_current_active_user)) -> Account:
        if current_user.role not in allowed:
            logger.warning(
                f"Account {current_user.id} with role {current_user.role} denied; "
                f"requires one of {sorted(allowed)}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
            )
        return current_user

    return role_checker


require_coach = require_roles(Role.COACH)
require_admin = require_roles(Role.ADMIN)
require_coach_or_admin = require_roles(Role.COACH, Role.ADMIN)
