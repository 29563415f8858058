# src/core/trips/service.py
"""
Жизненный цикл заявки на поездку.
Валидация, переходы статусов, авторизация и окно отмены.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from src.common.constants import TypeMsg
from src.common.logger import log_error, log_info, log_warning
from src.core.errors import InvalidStatusError, NotFoundError, ValidationError
from src.core.notifications.service import Notifier
from src.core.trips import policy
from src.core.trips.models import Trip, TripFilter, ensure_utc, utc_now
from src.core.trips.repository import TripRepository
from src.core.trips.state_machine import TripStateMachine
from src.core.users.repository import UserRepository
from src.infra.event_bus import EventBus
from src.shared.events import TripStatusChanged
from src.shared.models.enums import TripStatus


class TripLifecycleEngine:
    """
    Сервис поездок.

    Правила:
    - статус меняет только не автор заявки (approved или canceled);
    - отменить согласованную заявку может только автор, не позже чем за 7 суток до начала;
    - canceled является конечным статусом.

    Уведомление владельца и событие смены статуса отправляются после записи,
    их ошибки логируются и не влияют на результат операции.
    """

    def __init__(
        self,
        trips: TripRepository,
        users: UserRepository,
        notifier: Notifier,
        event_bus: Optional[EventBus] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Args:
            trips: Репозиторий поездок
            users: Репозиторий пользователей (для поиска получателя уведомления)
            notifier: Порт уведомлений
            event_bus: Шина событий для trip.status_changed
            clock: Источник текущего времени (UTC)
        """
        self._trips = trips
        self._users = users
        self._notifier = notifier
        self._event_bus = event_bus
        self._clock = clock

    async def create_trip(
        self,
        requester_id: Optional[UUID],
        destination: Optional[str],
        start_date: Optional[datetime],
        end_date: Optional[datetime],
    ) -> Trip:
        """
        Создаёт заявку в статусе requested.

        Raises:
            ValidationError: список всех нарушенных правил
            PersistenceError: ошибка хранилища
        """
        now = self._clock()
        trip = Trip(
            requester_id=requester_id,
            destination=destination or "",
            start_date=ensure_utc(start_date),
            end_date=ensure_utc(end_date),
            status=TripStatus.REQUESTED.value,
            created_at=now,
            updated_at=now,
        )

        errors = trip.validation_errors()
        if errors:
            raise ValidationError(errors)

        created = await self._trips.create(trip)
        await log_info(f"Создана заявка {created.id} (requester={requester_id})", type_msg=TypeMsg.INFO)
        return created

    async def get_trip(self, trip_id: UUID, caller_id: UUID) -> Trip:
        """Возвращает заявку. Смотреть можно любую: согласующему нужно её видеть."""
        trip = await self._trips.find_by_id(trip_id)
        if trip is None:
            raise NotFoundError()
        return trip

    async def list_trips(self, trip_filter: TripFilter) -> list[Trip]:
        return await self._trips.list(trip_filter)

    async def update_trip_status(
        self,
        trip_id: UUID,
        updater_id: UUID,
        new_status: str,
    ) -> None:
        """
        Меняет статус заявки по решению согласующего.

        Порядок проверок: наличие заявки, запрет самосогласования,
        допустимость целевого статуса, допустимость перехода.

        Raises:
            NotFoundError, SelfApprovalError, InvalidStatusError, StatusConflictError
        """
        trip = await self._trips.find_by_id(trip_id)
        if trip is None:
            raise NotFoundError()

        policy.ensure_not_requester(trip, updater_id)

        target = TripStateMachine.parse_target(str(new_status))
        if target is None:
            raise InvalidStatusError()

        if not TripStateMachine.can_transition(trip.status, target):
            raise InvalidStatusError()

        old_status = TripStatus(trip.status)
        await self._trips.update_status(
            trip.id, target, expected_status=old_status, updated_at=self._clock()
        )
        await log_info(
            f"Статус заявки {trip.id}: {old_status} -> {target} (updater={updater_id})",
            type_msg=TypeMsg.INFO,
        )

        await self._publish_status_changed(trip, old_status, target, updater_id, reason="status_update")
        await self._notify_requester(trip, f"Your trip to {trip.destination} has been {target}.")

    async def cancel_approved_trip(self, trip_id: UUID, canceling_user_id: UUID) -> None:
        """
        Отмена согласованной заявки её автором.

        Raises:
            NotFoundError, PermissionDeniedError, InvalidStatusError,
            CancelWindowError, StatusConflictError
        """
        trip = await self._trips.find_by_id(trip_id)
        if trip is None:
            raise NotFoundError()

        policy.ensure_requester(trip, canceling_user_id)

        if not trip.is_approved:
            raise InvalidStatusError()

        policy.ensure_cancel_window(trip, self._clock())

        await self._trips.update_status(
            trip.id, TripStatus.CANCELED, expected_status=TripStatus.APPROVED, updated_at=self._clock()
        )
        await log_info(f"Заявка {trip.id} отменена автором", type_msg=TypeMsg.INFO)

        await self._publish_status_changed(
            trip, TripStatus.APPROVED, TripStatus.CANCELED, canceling_user_id, reason="requester_cancel",
        )
        await self._notify_requester(trip, f"Your trip to {trip.destination} has been canceled.")

    async def _notify_requester(self, trip: Trip, message: str) -> None:
        try:
            requester = await self._users.find_by_id(trip.requester_id)
        except Exception as e:
            await log_warning(f"Не удалось получить автора заявки {trip.id} для уведомления: {e}")
            return

        if requester is None:
            await log_warning(f"Автор заявки {trip.id} не найден, уведомление не отправлено")
            return

        try:
            await self._notifier.notify(requester, trip, message)
        except Exception as e:
            await log_error(f"Ошибка уведомления по заявке {trip.id}: {e}", exc_info=True)

    async def _publish_status_changed(
        self,
        trip: Trip,
        old_status: TripStatus,
        new_status: TripStatus,
        actor_id: UUID,
        reason: str,
    ) -> None:
        if self._event_bus is None:
            return

        try:
            await self._event_bus.publish(TripStatusChanged(
                trip_id=str(trip.id),
                requester_id=str(trip.requester_id),
                old_status=old_status.value,
                new_status=new_status.value,
                actor_id=str(actor_id),
                reason=reason,
            ))
        except Exception as e:
            await log_error(f"Ошибка публикации trip.status_changed для {trip.id}: {e}")
