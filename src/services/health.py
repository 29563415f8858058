# src/services/health.py
"""
Проверка здоровья сервисов и их зависимостей.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from src.common.logger import log_warning
from src.shared.models.common import HealthStatus

HealthCheck = Callable[[], Awaitable[bool]]


async def collect_health(
    service: str,
    version: str,
    checks: dict[str, HealthCheck],
) -> HealthStatus:
    """
    Опрашивает зависимости.
    Недоступная зависимость переводит сервис в статус degraded.
    """
    dependencies: dict[str, str] = {}
    for name, check in checks.items():
        try:
            healthy = await check()
        except Exception as e:
            await log_warning(f"Health check {name} завершился ошибкой: {e}")
            healthy = False
        dependencies[name] = "healthy" if healthy else "unhealthy"

    status = "healthy" if all(v == "healthy" for v in dependencies.values()) else "degraded"
    return HealthStatus(service=service, status=status, version=version, dependencies=dependencies)
