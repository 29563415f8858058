# src/shared/models/common.py
"""
Общие модели ответов для всех сервисов.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Стандартный ответ с ошибкой."""

    error: str
    errors: list[str] | None = None


class MessageResponse(BaseModel):
    """Ответ с текстовым сообщением об успешной операции."""

    message: str


class HealthStatus(BaseModel):
    """Статус здоровья сервиса."""

    service: str
    status: str = "healthy"  # healthy, degraded, unhealthy
    version: str | None = None
    dependencies: dict[str, str] = Field(default_factory=dict)
    # dependencies: {"postgres": "healthy", "redis": "healthy", "rabbitmq": "healthy"}
