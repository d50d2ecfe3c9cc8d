"""Tests for JWT tokens and the identity provider."""

import sys
from datetime import timedelta
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from intake.errors import AuthError
from intake.session import SessionBootstrapper

from api.auth.identity import JwtIdentityProvider
from api.auth.jwt import (
    TOKEN_TYPE_ACCESS,
    TOKEN_TYPE_CUSTOM,
    create_access_token,
    create_custom_token,
    decode_token,
)


class TestTokens:
    """Tests for token creation and decoding."""

    def test_custom_token_round_trip(self):
        payload = decode_token(create_custom_token("uid-42"))

        assert payload.sub == "uid-42"
        assert payload.type == TOKEN_TYPE_CUSTOM

    def test_access_token_type(self):
        assert decode_token(create_access_token("uid-42")).type == TOKEN_TYPE_ACCESS

    def test_expired_token_raises(self):
        token = create_custom_token("uid-42", expires_delta=timedelta(seconds=-10))

        with pytest.raises(AuthError):
            decode_token(token)

    def test_garbage_token_raises(self):
        with pytest.raises(AuthError):
            decode_token("not-a-jwt")


class TestJwtIdentityProvider:
    """Tests for JwtIdentityProvider."""

    @pytest.mark.asyncio
    async def test_subscribe_reports_no_user(self):
        provider = JwtIdentityProvider()
        seen = []

        async def listener(uid):
            seen.append(uid)

        await provider.subscribe(listener)

        assert seen == [None]

    @pytest.mark.asyncio
    async def test_anonymous_sign_in_notifies(self):
        provider = JwtIdentityProvider()
        seen = []

        async def listener(uid):
            seen.append(uid)

        await provider.subscribe(listener)
        uid = await provider.sign_in_anonymously()

        assert seen == [None, uid]
        assert provider.current_uid == uid
        assert decode_token(provider.id_token).sub == uid

    @pytest.mark.asyncio
    async def test_anonymous_uids_differ(self):
        first = await JwtIdentityProvider().sign_in_anonymously()
        second = await JwtIdentityProvider().sign_in_anonymously()

        assert first != second

    @pytest.mark.asyncio
    async def test_custom_token_sign_in(self):
        provider = JwtIdentityProvider()

        uid = await provider.sign_in_with_custom_token(create_custom_token("known-user"))

        assert uid == "known-user"
        assert provider.current_uid == "known-user"

    @pytest.mark.asyncio
    async def test_access_token_rejected_for_custom_sign_in(self):
        provider = JwtIdentityProvider()

        with pytest.raises(AuthError, match="token type"):
            await provider.sign_in_with_custom_token(create_access_token("someone"))

        assert provider.current_uid is None

    @pytest.mark.asyncio
    async def test_unsubscribe(self):
        provider = JwtIdentityProvider()

        async def listener(uid):
            pass

        unsubscribe = await provider.subscribe(listener)
        assert provider.listener_count == 1

        unsubscribe()

        assert provider.listener_count == 0


class TestBootstrapWithJwtProvider:
    """The session bootstrapper against the real provider."""

    @pytest.mark.asyncio
    async def test_anonymous_bootstrap(self):
        provider = JwtIdentityProvider()
        session = SessionBootstrapper(provider)

        await session.start()

        assert session.session_ready is True
        assert session.identity == provider.current_uid

    @pytest.mark.asyncio
    async def test_custom_token_bootstrap(self):
        session = SessionBootstrapper(
            JwtIdentityProvider(), initial_auth_token=create_custom_token("known-user")
        )

        await session.start()

        assert session.identity == "known-user"

    @pytest.mark.asyncio
    async def test_bad_token_bootstrap_surfaces_auth_error(self):
        session = SessionBootstrapper(JwtIdentityProvider(), initial_auth_token="bogus")

        await session.start()

        assert session.session_ready is True
        assert session.identity is None
        assert isinstance(session.error, AuthError)
