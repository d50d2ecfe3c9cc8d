"""Session bootstrapping for the contact form.

Establishes exactly one identity per mount before submission is allowed.
The identity provider is subscribed to once; a notification without an
identity triggers sign-in (custom token if one was issued, otherwise
anonymous). Failures are surfaced as an AuthError but still mark the
session ready so the form never hangs on an unrecoverable init failure.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from intake.errors import AuthError
from intake.status import AUTH_FAILED_MESSAGE, INIT_FAILED_MESSAGE

logger = logging.getLogger("contact-intake-session")

IdentityListener = Callable[[str | None], Awaitable[None]]


class IdentityProvider(Protocol):
    """What the bootstrapper needs from an identity service."""

    async def subscribe(self, listener: IdentityListener) -> Callable[[], None]: ...

    async def sign_in_anonymously(self) -> str: ...

    async def sign_in_with_custom_token(self, token: str) -> str: ...


class SessionBootstrapper:
    """Owns the session identity for one form mount."""

    def __init__(
        self,
        provider: IdentityProvider,
        initial_auth_token: str | None = None,
        on_change: Callable[[], None] | None = None,
    ):
        self._provider = provider
        self._initial_auth_token = initial_auth_token
        self.on_change = on_change
        self._unsubscribe: Callable[[], None] | None = None
        self._started = False

        self.identity: str | None = None
        self.session_ready: bool = False
        self.error: AuthError | None = None

    async def start(self) -> None:
        """Subscribe to identity changes. Only the first call does anything."""
        if self._started:
            return
        self._started = True

        try:
            self._unsubscribe = await self._provider.subscribe(
                self._handle_identity_change
            )
        except Exception as e:
            logger.error(f"Identity service initialization error: {e!r}")
            self._fail(AuthError(INIT_FAILED_MESSAGE))

    def stop(self) -> None:
        """Tear down the identity subscription."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    @property
    def subscribed(self) -> bool:
        return self._unsubscribe is not None

    async def _handle_identity_change(self, identity: str | None) -> None:
        if identity:
            if self.identity is None:
                self.identity = identity
                self.session_ready = True
                logger.info(f"Authenticated with UID: {identity}")
                self._notify()
            elif identity != self.identity:
                logger.warning(
                    f"Ignoring identity change {self.identity} -> {identity}; "
                    "session identity is fixed for this mount"
                )
            return

        await self._authenticate()

    async def _authenticate(self) -> None:
        try:
            if self._initial_auth_token:
                await self._provider.sign_in_with_custom_token(
                    self._initial_auth_token
                )
            else:
                await self._provider.sign_in_anonymously()
        except Exception as e:
            logger.error(f"Identity service sign-in error: {e!r}")
            self._fail(AuthError(AUTH_FAILED_MESSAGE))

    def _fail(self, error: AuthError) -> None:
        self.error = error
        self.session_ready = True
        self._notify()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()
