# src/services/__init__.py
"""
HTTP-сервисы приложения.

Архитектура:
- Каждый сервис — независимое FastAPI-приложение
- Общая PostgreSQL (схема trip_approval)
- Коммуникация через RabbitMQ (события)
- Redis для отозванных токенов

Сервисы:
- users_service: регистрация, вход, выход, профиль
- trip_service: заявки на поездки, согласование и отмена
"""

__all__: list[str] = []
