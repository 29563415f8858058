# src/services/security.py
"""
Общие зависимости аутентификации для HTTP-сервисов.

Usage:
    @router.get("/me")
    async def me(user_id: UUID = Depends(get_current_user_id)):
        ...
"""

from __future__ import annotations

from uuid import UUID

from fastapi import Depends, Request

from src.config import settings
from src.core.auth import AuthProvider, JWTAuthProvider, JWTTokenManager, TokenRevocationStore
from src.core.errors import AuthenticationError
from src.infra.redis_client import get_redis


def get_token_manager() -> JWTTokenManager:
    return JWTTokenManager.from_settings(settings.auth)


def get_revocation_store() -> TokenRevocationStore:
    return TokenRevocationStore(
        redis=get_redis(),
        fallback_ttl=settings.auth.REVOKED_TOKEN_FALLBACK_TTL,
    )


def get_auth_provider(
    tokens: JWTTokenManager = Depends(get_token_manager),
    revocations: TokenRevocationStore = Depends(get_revocation_store),
) -> AuthProvider:
    return JWTAuthProvider(tokens, revocations)


def get_bearer_token(request: Request) -> str:
    """Извлекает токен из заголовка Authorization: Bearer <token>."""
    header = request.headers.get("Authorization")
    if not header:
        raise AuthenticationError("Authorization header is required")

    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise AuthenticationError("Authorization header format must be Bearer {token}")

    return parts[1]


async def get_current_user_id(
    token: str = Depends(get_bearer_token),
    auth: AuthProvider = Depends(get_auth_provider),
) -> UUID:
    return await auth.resolve_caller(token)
