# src/shared/__init__.py
"""
Общий код между сервисами и воркером.

Модули:
- events: схемы событий RabbitMQ
- models: DTO запросов и ответов HTTP API
"""

__all__: list[str] = []
