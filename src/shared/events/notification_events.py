# src/shared/events/notification_events.py
"""
События уведомлений.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from src.shared.events.base import DomainEvent


class NotificationRequested(DomainEvent):
    """Событие: запрос на отправку уведомления владельцу поездки."""

    event_type: Literal["notification.requested"] = "notification.requested"

    notification_id: str = ""
    recipient_id: str
    recipient_email: str
    recipient_name: str = ""
    trip_id: str | None = None
    channel: str = "log"
    message: str = Field(..., min_length=1)
