# src/shared/events/__init__.py
"""
Схемы событий для RabbitMQ.

- trip_events: изменение статуса поездки
- notification_events: запрос на отправку уведомления

Все события содержат event_id для дедупликации.
"""

from src.shared.events.base import DomainEvent, EventMetadata
from src.shared.events.trip_events import TripStatusChanged
from src.shared.events.notification_events import NotificationRequested

__all__ = [
    "DomainEvent",
    "EventMetadata",
    "TripStatusChanged",
    "NotificationRequested",
]
