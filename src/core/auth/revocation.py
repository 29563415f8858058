# src/core/auth/revocation.py
"""
Хранилище отозванных токенов в Redis.
Запись живёт до истечения самого токена и удаляется Redis автоматически.
"""

from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from typing import Optional

from src.common.constants import TypeMsg
from src.common.logger import log_info
from src.infra.redis_client import RedisClient

REVOKED_KEY_PREFIX = "revoked_token"


class TokenRevocationStore:
    """Отозванные токены. Создаётся на время жизни сервиса и передаётся через зависимости."""

    def __init__(self, redis: RedisClient, fallback_ttl: int = 86400) -> None:
        """
        Args:
            redis: Клиент Redis
            fallback_ttl: TTL (секунды) для токенов, срок действия которых неизвестен
        """
        self._redis = redis
        self._fallback_ttl = fallback_ttl

    @staticmethod
    def _key(token: str) -> str:
        digest = hashlib.sha256(token.encode()).hexdigest()
        return f"{REVOKED_KEY_PREFIX}:{digest}"

    async def revoke(self, token: str, expires_at: Optional[datetime] = None) -> None:
        if expires_at is None:
            ttl = self._fallback_ttl
        else:
            ttl = int((expires_at - datetime.now(timezone.utc)).total_seconds())
            if ttl <= 0:
                # Токен уже истёк и отвергается проверкой срока
                return

        await self._redis.set(self._key(token), "1", ttl=ttl)
        await log_info(f"Токен отозван на {ttl} с", type_msg=TypeMsg.DEBUG)

    async def is_revoked(self, token: str) -> bool:
        return await self._redis.exists(self._key(token))
