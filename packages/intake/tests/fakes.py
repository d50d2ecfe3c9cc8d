"""In-process fakes for the identity service, document store and inference API."""

import asyncio

from intake.errors import PredictionError, StoreError
from intake.schemas import ContactRecord


class FakeIdentityProvider:
    """Identity service double that records every call."""

    def __init__(
        self,
        uid: str | None = None,
        sign_in_uid: str = "anon-uid-123",
        fail_subscribe: bool = False,
        fail_sign_in: bool = False,
    ):
        self.uid = uid
        self.sign_in_uid = sign_in_uid
        self.fail_subscribe = fail_subscribe
        self.fail_sign_in = fail_sign_in
        self.listeners = []
        self.subscribe_calls = 0
        self.anonymous_sign_ins = 0
        self.custom_token_sign_ins: list[str] = []

    async def subscribe(self, listener):
        self.subscribe_calls += 1
        if self.fail_subscribe:
            raise RuntimeError("platform client misconfigured")
        self.listeners.append(listener)
        await listener(self.uid)
        return lambda: self.listeners.remove(listener)

    async def sign_in_anonymously(self) -> str:
        self.anonymous_sign_ins += 1
        if self.fail_sign_in:
            raise RuntimeError("anonymous sign-in disabled")
        await self.emit(self.sign_in_uid)
        return self.sign_in_uid

    async def sign_in_with_custom_token(self, token: str) -> str:
        self.custom_token_sign_ins.append(token)
        if self.fail_sign_in:
            raise RuntimeError("token rejected")
        uid = f"custom-{token}"
        await self.emit(uid)
        return uid

    async def emit(self, uid: str | None) -> None:
        self.uid = uid
        for listener in list(self.listeners):
            await listener(uid)


class FakeStore:
    """Document store double; records writes."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.saved: list[tuple[ContactRecord, str | None]] = []
        self.calls = 0

    async def save(self, record: ContactRecord, author_identity: str | None) -> str:
        self.calls += 1
        if self.fail or not author_identity:
            raise StoreError("Failed to save data to cloud.")
        self.saved.append((record, author_identity))
        return f"doc{len(self.saved):03d}"


class FakePredictor:
    """Inference client double; records requests."""

    def __init__(self, text: str = "United Kingdom. The +44 prefix...", fail: bool = False):
        self.text = text
        self.fail = fail
        self.requests: list[tuple[str, str]] = []
        self.gate: asyncio.Event | None = None

    async def predict(self, name: str, phone_number: str) -> str:
        self.requests.append((name, phone_number))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise PredictionError("API call failed with status: 500")
        return self.text
