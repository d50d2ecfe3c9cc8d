"""JWT token creation and validation for the identity service.

Two token types:
- custom: pre-issued out of band, exchanged for a session on sign-in
- access: issued to a page session once it is signed in
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Any

from intake.errors import AuthError
from jose import JWTError, jwt
from pydantic import BaseModel

# JWT Configuration
SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_IN_PRODUCTION_32_BYTES!")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60
CUSTOM_TOKEN_EXPIRE_MINUTES = 60

TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_CUSTOM = "custom"


class TokenPayload(BaseModel):
    """JWT token payload structure."""

    sub: str  # User ID
    type: str  # "access" or "custom"
    exp: datetime
    iat: datetime


def _create_token(user_id: str, token_type: str, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)

    to_encode: dict[str, Any] = {
        "sub": str(user_id),
        "type": token_type,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Create an access token for a signed-in session.

    Args:
        user_id: The session's uid.
        expires_delta: Optional custom expiration time.

    Returns:
        Encoded JWT access token.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    return _create_token(user_id, TOKEN_TYPE_ACCESS, expires_delta)


def create_custom_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Create a custom sign-in token for a known uid.

    Args:
        user_id: The uid the holder of this token signs in as.
        expires_delta: Optional custom expiration time.

    Returns:
        Encoded JWT custom token.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=CUSTOM_TOKEN_EXPIRE_MINUTES)
    return _create_token(user_id, TOKEN_TYPE_CUSTOM, expires_delta)


def decode_token(token: str) -> TokenPayload:
    """Decode and validate a JWT token.

    Args:
        token: The JWT token to decode.

    Returns:
        TokenPayload with user ID and token metadata.

    Raises:
        AuthError: If token is invalid or expired.
    """
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return TokenPayload(
            sub=payload["sub"],
            type=payload["type"],
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        )
    except (JWTError, KeyError) as e:
        raise AuthError(f"Invalid token: {e!s}") from e
