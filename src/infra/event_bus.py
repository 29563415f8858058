# src/infra/event_bus.py
"""
Шина событий на базе RabbitMQ.
Реализует паттерн Pub/Sub между сервисами поездок и воркером уведомлений.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Protocol
from uuid import uuid4

import aio_pika
from aio_pika import ExchangeType, Message
from aio_pika.abc import (
    AbstractChannel,
    AbstractConnection,
    AbstractExchange,
    AbstractIncomingMessage,
    AbstractQueue,
)

from src.common.logger import get_logger, log_error, log_info
from src.common.constants import TypeMsg

logger = get_logger("event_bus")


class PublishableEvent(Protocol):
    """Любое событие, которое умеет сериализоваться (см. src.shared.events)."""

    @property
    def event_type(self) -> str: ...

    @property
    def event_id(self) -> str: ...

    def to_json(self) -> str: ...


@dataclass
class IncomingEvent:
    """Событие, полученное из очереди: тип, идентификатор и полное тело сообщения."""
    event_id: str = field(default_factory=lambda: str(uuid4()))
    event_type: str = ""
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: str | bytes) -> IncomingEvent:
        """Разбирает тело сообщения. event_id берётся из metadata, если он там есть."""
        parsed = json.loads(data)
        metadata = parsed.get("metadata") or {}
        return cls(
            event_id=metadata.get("event_id") or parsed.get("event_id") or str(uuid4()),
            event_type=parsed.get("event_type", ""),
            payload=parsed,
        )


class EventTypes:
    """Константы типов событий (routing keys)."""
    TRIP_STATUS_CHANGED = "trip.status_changed"
    NOTIFICATION_REQUESTED = "notification.requested"


EventHandler = Callable[[IncomingEvent], Awaitable[None]]


class EventBus:
    """
    Шина событий на базе RabbitMQ.

    Реализует:
    - Публикацию событий в topic exchange (routing_key = event_type)
    - Подписку на события через durable очереди
    - Автоматическое переподключение (connect_robust)
    """

    _instance: EventBus | None = None
    _connection: AbstractConnection | None = None
    _channel: AbstractChannel | None = None
    _exchange: AbstractExchange | None = None
    _handlers: dict[str, list[EventHandler]]

    def __new__(cls) -> EventBus:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if hasattr(self, "_initialized"):
            return
        self._initialized = True
        self._connection = None
        self._channel = None
        self._exchange = None
        self._handlers = {}
        self._exchange_name = "trips.events"
        self._queues: dict[str, AbstractQueue] = {}

    @property
    def is_connected(self) -> bool:
        """Проверяет, активно ли соединение."""
        return self._connection is not None and not self._connection.is_closed

    async def connect(
        self,
        url: str,
        exchange_name: str | None = None,
        prefetch_count: int = 10,
    ) -> None:
        """
        Подключается к RabbitMQ и объявляет exchange.

        Args:
            url: URL RabbitMQ
            exchange_name: Имя exchange
            prefetch_count: Количество сообщений для prefetch
        """
        if self.is_connected:
            return

        if exchange_name:
            self._exchange_name = exchange_name

        self._connection = await aio_pika.connect_robust(url)
        self._channel = await self._connection.channel()
        await self._channel.set_qos(prefetch_count=prefetch_count)

        self._exchange = await self._channel.declare_exchange(
            self._exchange_name,
            ExchangeType.TOPIC,
            durable=True,
        )

    async def disconnect(self) -> None:
        """Закрывает соединение с RabbitMQ."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
            self._channel = None
            self._exchange = None
            self._queues = {}
            await log_info("Соединение с RabbitMQ закрыто", type_msg=TypeMsg.DEBUG)

    async def publish(self, event: PublishableEvent) -> bool:
        """
        Публикует событие в exchange.

        Ошибки публикации логируются и не пробрасываются.

        Returns:
            True если событие опубликовано
        """
        if not self.is_connected or self._exchange is None:
            await log_error(
                f"Не удалось опубликовать событие {event.event_type}: нет соединения с RabbitMQ"
            )
            return False

        try:
            message = Message(
                body=event.to_json().encode(),
                content_type="application/json",
                message_id=event.event_id,
                timestamp=datetime.now(timezone.utc),
                delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
            )
            await self._exchange.publish(message, routing_key=event.event_type)
        except Exception as e:
            await log_error(f"Ошибка публикации события {event.event_type}: {e}", exc_info=True)
            return False

        await log_info(f"Событие опубликовано: {event.event_type}", type_msg=TypeMsg.DEBUG)
        return True

    async def subscribe(
        self,
        event_type: str,
        handler: EventHandler,
        queue_name: str | None = None,
    ) -> None:
        """
        Подписывается на события определённого типа.

        Args:
            event_type: Тип события (routing_key pattern)
            handler: Асинхронный обработчик события
            queue_name: Имя очереди (по умолчанию строится из event_type)
        """
        if not self.is_connected or self._channel is None or self._exchange is None:
            await log_error("Не удалось подписаться: нет соединения с RabbitMQ")
            return

        self._handlers.setdefault(event_type, []).append(handler)

        if queue_name is None:
            queue_name = f"trips.{event_type.replace('.', '_')}"

        if queue_name not in self._queues:
            queue = await self._channel.declare_queue(queue_name, durable=True)
            await queue.bind(self._exchange, routing_key=event_type)
            self._queues[queue_name] = queue
            await queue.consume(self._make_consumer(event_type))

        await log_info(f"Подписка на события: {event_type}", type_msg=TypeMsg.DEBUG)

    def _make_consumer(self, event_type: str) -> Callable[[AbstractIncomingMessage], Awaitable[None]]:
        """Создаёт consumer: сообщение подтверждается после вызова всех обработчиков."""
        async def consumer(message: AbstractIncomingMessage) -> None:
            async with message.process():
                try:
                    event = IncomingEvent.from_json(message.body)
                except (ValueError, AttributeError) as e:
                    await log_error(f"Некорректное сообщение в очереди {event_type}: {e}")
                    return

                for handler in self._handlers.get(event_type, []):
                    try:
                        await handler(event)
                    except Exception as e:
                        await log_error(
                            f"Ошибка в обработчике {getattr(handler, '__name__', handler)}: {e}",
                            exc_info=True,
                        )

        return consumer

    async def health_check(self) -> bool:
        return self.is_connected


def get_event_bus() -> EventBus:
    """Возвращает глобальный экземпляр EventBus."""
    return EventBus()


async def init_event_bus() -> None:
    """
    Инициализирует подключение к RabbitMQ.
    Использует настройки из конфигурации.
    """
    from src.config import settings

    await get_event_bus().connect(
        url=settings.rabbitmq.url,
        exchange_name=settings.rabbitmq.RABBITMQ_EXCHANGE,
        prefetch_count=settings.rabbitmq.RABBITMQ_PREFETCH_COUNT,
    )
    await log_info(
        f"RabbitMQ подключён: {settings.rabbitmq.RABBITMQ_HOST}:{settings.rabbitmq.RABBITMQ_PORT}",
        type_msg=TypeMsg.INFO,
    )


async def close_event_bus() -> None:
    """Закрывает подключение к RabbitMQ."""
    await get_event_bus().disconnect()
    await log_info("RabbitMQ отключён", type_msg=TypeMsg.INFO)
