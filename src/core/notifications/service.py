# src/core/notifications/service.py
"""
Сервис уведомлений.
Публикует запросы на уведомление в шину событий; доставку выполняет воркер.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING
from uuid import uuid4

from src.common.constants import TypeMsg
from src.common.logger import log_error, log_info
from src.infra.event_bus import EventBus
from src.shared.events import NotificationRequested

if TYPE_CHECKING:
    from src.core.trips.models import Trip
    from src.core.users.models import User


class Notifier(ABC):
    """Порт уведомлений. Ошибки доставки обрабатывает сама реализация."""

    @abstractmethod
    async def notify(self, user: User, trip: Trip, message: str) -> bool:
        ...


class NotificationService(Notifier):
    """
    Сервис уведомлений.

    Публикует NotificationRequested в шину событий.
    Фактическая отправка происходит в NotificationWorker.
    """

    def __init__(self, event_bus: EventBus, channel: str = "log") -> None:
        """
        Args:
            event_bus: Шина событий
            channel: Канал доставки
        """
        self._event_bus = event_bus
        self._channel = channel

    async def notify(self, user: User, trip: Trip, message: str) -> bool:
        """
        Ставит уведомление владельцу поездки в очередь.

        Returns:
            True если событие опубликовано
        """
        try:
            event = NotificationRequested(
                notification_id=str(uuid4()),
                recipient_id=str(user.id),
                recipient_email=user.email,
                recipient_name=user.name,
                trip_id=str(trip.id),
                channel=self._channel,
                message=message,
            )
            published = await self._event_bus.publish(event)
        except Exception as e:
            await log_error(f"Ошибка отправки уведомления пользователю {user.id}: {e}", exc_info=True)
            return False

        if published:
            await log_info(
                f"Уведомление поставлено в очередь: user={user.id}, trip={trip.id}",
                type_msg=TypeMsg.DEBUG,
            )
        return published
