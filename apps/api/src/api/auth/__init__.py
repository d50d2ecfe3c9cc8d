"""Authentication module.

Provides the JWT-backed identity provider used to establish one identity
per page session.
"""

from api.auth.identity import JwtIdentityProvider
from api.auth.jwt import (
    create_access_token,
    create_custom_token,
    decode_token,
)

__all__ = [
    "JwtIdentityProvider",
    "create_access_token",
    "create_custom_token",
    "decode_token",
]
