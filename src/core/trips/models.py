# src/core/trips/models.py
"""
Модели домена поездок.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from src.shared.models.enums import TripStatus

VALID_STATUSES = frozenset(status.value for status in TripStatus)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Даты без часового пояса считаются UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class Trip(BaseModel):
    """
    Заявка на поездку.

    Поля не ограничены схемой: полный список нарушений
    возвращает validation_errors().
    """

    id: UUID = Field(default_factory=uuid4, description="UUID поездки")
    requester_id: Optional[UUID] = Field(None, description="Автор заявки")
    destination: str = Field("", description="Пункт назначения")
    start_date: Optional[datetime] = Field(None, description="Начало поездки")
    end_date: Optional[datetime] = Field(None, description="Окончание поездки")
    status: str = Field(TripStatus.REQUESTED.value, description="Статус заявки")

    created_at: datetime = Field(default_factory=utc_now, description="Время создания")
    updated_at: datetime = Field(default_factory=utc_now, description="Время обновления")

    class Config:
        from_attributes = True

    def validation_errors(self) -> list[str]:
        """Проверяет все правила и возвращает все нарушения, а не только первое."""
        errors: list[str] = []

        if self.requester_id is None:
            errors.append("requester_id is required")
        if not self.destination or not self.destination.strip():
            errors.append("destination is required")
        if self.start_date is None:
            errors.append("start_date is required")
        if self.end_date is None:
            errors.append("end_date is required")
        if (
            self.start_date is not None
            and self.end_date is not None
            and ensure_utc(self.end_date) <= ensure_utc(self.start_date)
        ):
            errors.append("end_date must be after start_date")
        if str(self.status) not in VALID_STATUSES:
            errors.append("invalid status")

        return errors

    @property
    def is_approved(self) -> bool:
        return self.status == TripStatus.APPROVED

    @property
    def is_canceled(self) -> bool:
        return self.status == TripStatus.CANCELED


class TripFilter(BaseModel):
    """Фильтр списка поездок. Пустое поле означает отсутствие ограничения, поля объединяются по AND."""

    requester_id: Optional[UUID] = None
    status: Optional[TripStatus] = None
    destination: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    def matches(self, trip: Trip) -> bool:
        """Проверяет поездку на соответствие фильтру (используется in-memory реализациями)."""
        if self.requester_id is not None and trip.requester_id != self.requester_id:
            return False
        if self.status is not None and trip.status != self.status:
            return False
        if self.destination and self.destination.lower() not in trip.destination.lower():
            return False
        if self.start_date is not None and ensure_utc(trip.start_date) < ensure_utc(self.start_date):
            return False
        if self.end_date is not None and ensure_utc(trip.end_date) > ensure_utc(self.end_date):
            return False
        return True
