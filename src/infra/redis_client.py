# src/infra/redis_client.py
"""
Клиент Redis.
Используется как общее хранилище с TTL (отозванные токены).
"""

from __future__ import annotations

import redis.asyncio as redis

from src.common.logger import get_logger, log_error, log_info
from src.common.constants import TypeMsg

logger = get_logger("redis")


class RedisClient:
    """
    Асинхронный клиент Redis.
    Все ключи автоматически получают namespace проекта.
    """

    _instance: RedisClient | None = None
    _client: redis.Redis | None = None

    def __new__(cls) -> RedisClient:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if hasattr(self, "_initialized"):
            return
        self._initialized = True
        self._client = None
        self._namespace = "trips"

    @property
    def client(self) -> redis.Redis:
        """Возвращает клиент Redis."""
        if self._client is None:
            raise RuntimeError("Redis клиент не инициализирован. Вызовите connect() сначала.")
        return self._client

    def _make_key(self, key: str) -> str:
        """Добавляет namespace к ключу."""
        return f"{self._namespace}:{key}"

    async def connect(
        self,
        url: str,
        max_connections: int = 50,
        namespace: str | None = None,
    ) -> None:
        """
        Подключается к Redis.

        Args:
            url: URL Redis
            max_connections: Максимальное количество соединений
            namespace: Префикс ключей
        """
        if self._client is not None:
            return

        if namespace:
            self._namespace = namespace

        self._client = redis.from_url(
            url,
            max_connections=max_connections,
            decode_responses=True,
        )

        # Проверяем подключение
        await self._client.ping()

    async def disconnect(self) -> None:
        """Закрывает соединение с Redis."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            await log_info("Соединение с Redis закрыто", type_msg=TypeMsg.DEBUG)

    # =========================================================================
    # БАЗОВЫЕ ОПЕРАЦИИ
    # =========================================================================

    async def set(
        self,
        key: str,
        value: str,
        ttl: int | None = None,
    ) -> bool:
        """
        Устанавливает значение.

        Args:
            key: Ключ
            value: Значение
            ttl: Время жизни в секундах (None — бессрочно)
        """
        return await self.client.set(self._make_key(key), value, ex=ttl)

    async def exists(self, key: str) -> bool:
        return await self.client.exists(self._make_key(key)) > 0

    async def health_check(self) -> bool:
        """Проверяет здоровье подключения к Redis."""
        try:
            return await self.client.ping()
        except Exception as e:
            await log_error(f"Health check Redis failed: {e}")
            return False


def get_redis() -> RedisClient:
    """Возвращает глобальный экземпляр RedisClient."""
    return RedisClient()


async def init_redis() -> None:
    """
    Инициализирует подключение к Redis.
    Использует настройки из конфигурации.
    """
    from src.config import settings

    await get_redis().connect(
        url=settings.redis.url,
        max_connections=settings.redis.REDIS_MAX_CONNECTIONS,
        namespace=settings.redis.REDIS_NAMESPACE,
    )
    await log_info(
        f"Redis подключён: {settings.redis.REDIS_HOST}:{settings.redis.REDIS_PORT}/{settings.redis.REDIS_DB}",
        type_msg=TypeMsg.INFO,
    )


async def close_redis() -> None:
    """Закрывает подключение к Redis."""
    await get_redis().disconnect()
    await log_info("Redis отключён", type_msg=TypeMsg.INFO)
