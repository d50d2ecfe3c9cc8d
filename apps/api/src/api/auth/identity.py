"""JWT-backed identity provider.

One provider per page session. Listeners are awaited immediately with the
current uid (or None) when they subscribe, then again on every sign-in.
"""

import logging
from collections.abc import Callable
from uuid import uuid4

from intake.errors import AuthError
from intake.session import IdentityListener

from api.auth.jwt import TOKEN_TYPE_CUSTOM, create_access_token, decode_token

logger = logging.getLogger("contact-intake-identity")


class JwtIdentityProvider:
    """Anonymous and custom-token sign-in backed by signed JWTs."""

    def __init__(self):
        self._listeners: list[IdentityListener] = []
        self._uid: str | None = None
        self.id_token: str | None = None

    @property
    def current_uid(self) -> str | None:
        return self._uid

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    async def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """Subscribe to identity changes. Returns an unsubscriber."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        await listener(self._uid)
        return unsubscribe

    async def sign_in_anonymously(self) -> str:
        """Sign in as a fresh anonymous uid."""
        uid = uuid4().hex
        await self._set_user(uid)
        return uid

    async def sign_in_with_custom_token(self, token: str) -> str:
        """Sign in as the uid carried by a pre-issued custom token.

        Raises:
            AuthError: If the token is invalid, expired, or not a custom token.
        """
        payload = decode_token(token)
        if payload.type != TOKEN_TYPE_CUSTOM:
            raise AuthError("Invalid token type")
        await self._set_user(payload.sub)
        return payload.sub

    async def _set_user(self, uid: str) -> None:
        self._uid = uid
        self.id_token = create_access_token(uid)
        logger.debug(f"Signed in as {uid}")
        for listener in list(self._listeners):
            await listener(uid)
