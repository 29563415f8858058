# src/core/trips/policy.py
"""
Правила авторизации и окно отмены.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from uuid import UUID

from src.core.errors import CancelWindowError, PermissionDeniedError, SelfApprovalError
from src.core.trips.models import Trip, ensure_utc

# Минимальный срок до начала поездки для отмены согласованной заявки автором
CANCEL_WINDOW = timedelta(days=7)


def ensure_not_requester(trip: Trip, updater_id: UUID) -> None:
    """Автор заявки не может сам менять её статус."""
    if trip.requester_id == updater_id:
        raise SelfApprovalError()


def ensure_requester(trip: Trip, user_id: UUID) -> None:
    """Отменить согласованную заявку может только её автор."""
    if trip.requester_id != user_id:
        raise PermissionDeniedError()


def ensure_cancel_window(trip: Trip, now: datetime) -> None:
    """
    Отмена запрещена, если до начала поездки осталось строго меньше 7 суток.
    Ровно 7 суток отмену допускают.
    """
    if ensure_utc(trip.start_date) - ensure_utc(now) < CANCEL_WINDOW:
        raise CancelWindowError()
