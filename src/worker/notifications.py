# src/worker/notifications.py
"""
Воркер доставки уведомлений.
Канал доставки по умолчанию: журнал приложения.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from src.worker.base import BaseWorker
from src.infra.event_bus import EventBus, EventTypes, IncomingEvent
from src.common.logger import log_info, log_warning
from src.common.constants import TypeMsg
from src.shared.events import NotificationRequested, TripStatusChanged


class NotificationWorker(BaseWorker):
    """
    Воркер уведомлений.

    - notification.requested: доставляет сообщение получателю
    - trip.status_changed: пишет запись аудита
    """

    def __init__(self, event_bus: Optional[EventBus] = None) -> None:
        super().__init__(event_bus)
        self.delivered_count = 0

    @property
    def name(self) -> str:
        return "NotificationWorker"

    @property
    def subscriptions(self) -> List[str]:
        return [
            EventTypes.NOTIFICATION_REQUESTED,
            EventTypes.TRIP_STATUS_CHANGED,
        ]

    async def handle_event(self, event: IncomingEvent) -> None:
        handlers: Dict[str, Callable[[IncomingEvent], Awaitable[None]]] = {
            EventTypes.NOTIFICATION_REQUESTED: self._deliver_notification,
            EventTypes.TRIP_STATUS_CHANGED: self._audit_status_change,
        }

        handler = handlers.get(event.event_type)
        if handler:
            await handler(event)

    async def _deliver_notification(self, event: IncomingEvent) -> None:
        try:
            notification = NotificationRequested.model_validate(event.payload)
        except PydanticValidationError as e:
            await log_warning(f"Некорректное уведомление {event.event_id}: {e}")
            return

        await log_info(
            "--- NOTIFICATION ---\n"
            f"To: {notification.recipient_name} ({notification.recipient_email})\n"
            f"Trip ID: {notification.trip_id}\n"
            f"Message: {notification.message}\n"
            "--- END NOTIFICATION ---",
            type_msg=TypeMsg.INFO,
            extra={
                "notification_id": notification.notification_id,
                "recipient_id": notification.recipient_id,
                "channel": notification.channel,
            },
        )
        self.delivered_count += 1

    async def _audit_status_change(self, event: IncomingEvent) -> None:
        try:
            change = TripStatusChanged.model_validate(event.payload)
        except PydanticValidationError as e:
            await log_warning(f"Некорректное событие смены статуса {event.event_id}: {e}")
            return

        await log_info(
            f"Заявка {change.trip_id}: {change.old_status} -> {change.new_status} "
            f"(actor={change.actor_id}, reason={change.reason})",
            type_msg=TypeMsg.INFO,
        )
