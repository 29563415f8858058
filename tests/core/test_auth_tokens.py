# tests/core/test_auth_tokens.py
"""
Тесты JWTTokenManager и JWTAuthProvider.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import jwt
import pytest

from src.core.auth.tokens import JWTAuthProvider, JWTTokenManager
from src.core.errors import AuthenticationError

SECRET = "unit-test-secret"


@pytest.fixture
def token_manager() -> JWTTokenManager:
    return JWTTokenManager(SECRET, expiration_hours=72)


@pytest.fixture
def revocations() -> AsyncMock:
    store = AsyncMock()
    store.is_revoked = AsyncMock(return_value=False)
    store.revoke = AsyncMock(return_value=None)
    return store


class TestTokenManager:
    """Выпуск и проверка токенов."""

    def test_issued_token_carries_user_id(self, token_manager) -> None:
        user_id = uuid4()

        claims = token_manager.decode(token_manager.issue_token(user_id))

        assert claims["user_id"] == str(user_id)
        assert claims["exp"] - claims["iat"] == 72 * 3600

    def test_wrong_secret_rejected(self, token_manager) -> None:
        token = JWTTokenManager("other-secret").issue_token(uuid4())

        with pytest.raises(AuthenticationError, match="Invalid or expired token"):
            token_manager.decode(token)

    def test_expired_token_rejected(self) -> None:
        past = datetime.now(timezone.utc) - timedelta(days=10)
        manager = JWTTokenManager(SECRET, expiration_hours=1, clock=lambda: past)
        token = manager.issue_token(uuid4())

        with pytest.raises(AuthenticationError):
            JWTTokenManager(SECRET).decode(token)

    def test_token_without_exp_rejected(self, token_manager) -> None:
        token = jwt.encode({"user_id": str(uuid4())}, SECRET, algorithm="HS256")

        with pytest.raises(AuthenticationError, match="Invalid or expired token"):
            token_manager.decode(token)

        assert token_manager.expires_at(token) is None

    def test_garbage_rejected(self, token_manager) -> None:
        with pytest.raises(AuthenticationError):
            token_manager.decode("not.a.jwt")

    def test_expires_at(self, token_manager) -> None:
        token = token_manager.issue_token(uuid4())

        expires_at = token_manager.expires_at(token)

        assert expires_at is not None
        assert timedelta(hours=71) < expires_at - datetime.now(timezone.utc) <= timedelta(hours=72)

    def test_expires_at_of_invalid_token(self, token_manager) -> None:
        assert token_manager.expires_at("garbage") is None


class TestAuthProvider:
    @pytest.mark.asyncio
    async def test_resolves_caller(self, token_manager, revocations) -> None:
        user_id = uuid4()
        provider = JWTAuthProvider(token_manager, revocations)

        assert await provider.resolve_caller(token_manager.issue_token(user_id)) == user_id

    @pytest.mark.asyncio
    async def test_revoked_token(self, token_manager, revocations) -> None:
        revocations.is_revoked.return_value = True
        provider = JWTAuthProvider(token_manager, revocations)

        with pytest.raises(AuthenticationError, match="Token has been revoked"):
            await provider.resolve_caller(token_manager.issue_token(uuid4()))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_id", [None, 42, "not-a-uuid"])
    async def test_bad_user_id_claim(self, revocations, user_id) -> None:
        claims = {"exp": datetime.now(timezone.utc) + timedelta(hours=1)}
        if user_id is not None:
            claims["user_id"] = user_id
        token = jwt.encode(claims, SECRET, algorithm="HS256")
        provider = JWTAuthProvider(JWTTokenManager(SECRET), revocations)

        with pytest.raises(AuthenticationError, match="Invalid user ID in token"):
            await provider.resolve_caller(token)

    @pytest.mark.asyncio
    async def test_revoke_passes_expiry(self, token_manager, revocations) -> None:
        token = token_manager.issue_token(uuid4())
        provider = JWTAuthProvider(token_manager, revocations)

        await provider.revoke(token)

        revoked_token, expires_at = revocations.revoke.call_args[0]
        assert revoked_token == token
        assert expires_at == token_manager.expires_at(token)
