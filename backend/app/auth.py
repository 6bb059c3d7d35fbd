"""
Password hashing and JWT helpers for Courtside.

Access tokens are short-lived and signed with ``secret_key``; refresh tokens
are signed with ``refresh_secret_key`` and carry a ``jti`` that is persisted
so it can be rotated or revoked.
"""

from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict, Optional, Tuple, cast
import uuid

from fastapi.security import OAuth2PasswordBearer
import jwt
from jwt import InvalidTokenError
from passlib.context import CryptContext

from .core.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a bcrypt hash.

    Returns False (never raises) for malformed hashes.
    """
    try:
        return bool(pwd_context.verify(plain_password, hashed_password))
    except (ValueError, TypeError) as e:
        logger.error(f"Error verifying password: {str(e)}")
        return False


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    return str(pwd_context.hash(password))


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode; ``sub`` must be the account id
        expires_delta: Optional lifetime override

    Returns:
        str: The encoded JWT token
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire, "type": ACCESS_TOKEN_TYPE})

    encoded_jwt = cast(
        str,
        jwt.encode(to_encode, settings.secret_key.get_secret_value(), algorithm=settings.algorithm),
    )
    logger.debug(f"Created access token for account: {data.get('sub')}")
    return encoded_jwt


def create_refresh_token(
    account_id: str, expires_delta: Optional[timedelta] = None
) -> Tuple[str, str, datetime]:
    """
    Create a refresh token.

    Returns:
        (token, jti, expires_at); the caller persists ``jti``.
    """
    jti = uuid.uuid4().hex
    expires_at = datetime.now(timezone.utc) + (
        expires_delta or timedelta(days=settings.refresh_token_expire_days)
    )
    payload = {"sub": account_id, "jti": jti, "type": REFRESH_TOKEN_TYPE, "exp": expires_at}
    token = cast(
        str,
        jwt.encode(
            payload, settings.refresh_secret_key.get_secret_value(), algorithm=settings.algorithm
        ),
    )
    return token, jti, expires_at


def _decode(token: str, secret: str, expected_type: str) -> Dict[str, Any]:
    payload = cast(Dict[str, Any], jwt.decode(token, secret, algorithms=[settings.algorithm]))
    if payload.get("type") != expected_type:
        raise InvalidTokenError(f"Expected a {expected_type} token")
    if not isinstance(payload.get("sub"), str):
        raise InvalidTokenError("Token payload missing 'sub' field")
    return payload


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode and validate an access token. Raises PyJWTError subclasses."""
    return _decode(token, settings.secret_key.get_secret_value(), ACCESS_TOKEN_TYPE)


def decode_refresh_token(token: str) -> Dict[str, Any]:
    """Decode and validate a refresh token. Raises PyJWTError subclasses."""
    payload = _decode(token, settings.refresh_secret_key.get_secret_value(), REFRESH_TOKEN_TYPE)
    if not isinstance(payload.get("jti"), str):
        raise InvalidTokenError("Refresh token missing 'jti'")
    return payload
