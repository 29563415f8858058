# src/core/auth/tokens.py
"""
JWT-токены (HS256) и определение вызывающего пользователя.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional
from uuid import UUID

import jwt

from src.config import AuthSettings
from src.core.auth.revocation import TokenRevocationStore
from src.core.errors import AuthenticationError


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class JWTTokenManager:
    """Выпуск и проверка токенов доступа."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expiration_hours: int = 72,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expiration = timedelta(hours=expiration_hours)
        self._clock = clock

    @classmethod
    def from_settings(cls, auth: AuthSettings) -> JWTTokenManager:
        return cls(
            secret_key=auth.JWT_SECRET_KEY,
            algorithm=auth.JWT_ALGORITHM,
            expiration_hours=auth.JWT_EXPIRATION_HOURS,
        )

    def issue_token(self, user_id: UUID) -> str:
        now = self._clock()
        payload = {
            "user_id": str(user_id),
            "iat": int(now.timestamp()),
            "exp": int((now + self._expiration).timestamp()),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        """
        Проверяет подпись и срок действия.

        Raises:
            AuthenticationError: токен недействителен или истёк
        """
        try:
            return jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["exp"]},
            )
        except jwt.InvalidTokenError as e:
            raise AuthenticationError("Invalid or expired token") from e

    def expires_at(self, token: str) -> Optional[datetime]:
        """Время истечения валидного токена или None, если токен не декодируется."""
        try:
            claims = self.decode(token)
        except AuthenticationError:
            return None

        exp = claims.get("exp")
        if exp is None:
            return None
        return datetime.fromtimestamp(exp, tz=timezone.utc)


class AuthProvider(ABC):
    """Порт идентификации: токен -> ID вызывающего пользователя."""

    @abstractmethod
    async def resolve_caller(self, token: str) -> UUID: ...

    @abstractmethod
    async def revoke(self, token: str) -> None: ...


class JWTAuthProvider(AuthProvider):
    def __init__(self, tokens: JWTTokenManager, revocations: TokenRevocationStore) -> None:
        self._tokens = tokens
        self._revocations = revocations

    async def resolve_caller(self, token: str) -> UUID:
        if await self._revocations.is_revoked(token):
            raise AuthenticationError("Token has been revoked")

        claims = self._tokens.decode(token)

        raw_user_id = claims.get("user_id")
        if not isinstance(raw_user_id, str):
            raise AuthenticationError("Invalid user ID in token")
        try:
            return UUID(raw_user_id)
        except ValueError as e:
            raise AuthenticationError("Invalid user ID in token") from e

    async def revoke(self, token: str) -> None:
        await self._revocations.revoke(token, self._tokens.expires_at(token))
