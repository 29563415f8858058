# src/shared/events/trip_events.py
"""
События домена поездок.
"""

from __future__ import annotations

from typing import Literal

from src.shared.events.base import DomainEvent


class TripStatusChanged(DomainEvent):
    """Событие: статус поездки изменён (согласование или отмена)."""

    event_type: Literal["trip.status_changed"] = "trip.status_changed"

    trip_id: str
    requester_id: str
    old_status: str
    new_status: str  # approved, canceled
    actor_id: str
    reason: str | None = None
