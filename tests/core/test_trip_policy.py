# tests/core/test_trip_policy.py
"""
Тесты state machine и правил авторизации.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from src.core.errors import CancelWindowError, PermissionDeniedError, SelfApprovalError
from src.core.trips import policy
from src.core.trips.models import Trip
from src.core.trips.state_machine import TripStateMachine
from src.shared.models.enums import TripStatus

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def trip_starting_in(delta: timedelta, **overrides) -> Trip:
    data = {
        "requester_id": uuid4(),
        "destination": "Lisbon",
        "start_date": NOW + delta,
        "end_date": NOW + delta + timedelta(days=3),
        "status": "approved",
    }
    data.update(overrides)
    return Trip(**data)


class TestTripStateMachine:
    """Тесты переходов статусов."""

    @pytest.mark.parametrize(
        "current, new",
        [
            ("requested", "approved"),
            ("requested", "canceled"),
            ("approved", "canceled"),
        ],
    )
    def test_allowed(self, current: str, new: str) -> None:
        assert TripStateMachine.can_transition(current, new)

    @pytest.mark.parametrize(
        "current, new",
        [
            ("canceled", "approved"),
            ("canceled", "requested"),
            ("canceled", "canceled"),
            ("approved", "approved"),
            ("approved", "requested"),
            ("requested", "requested"),
        ],
    )
    def test_forbidden(self, current: str, new: str) -> None:
        assert not TripStateMachine.can_transition(current, new)

    def test_unknown_status(self) -> None:
        assert not TripStateMachine.can_transition("solicitado", "approved")

    def test_parse_target(self) -> None:
        assert TripStateMachine.parse_target("approved") is TripStatus.APPROVED
        assert TripStateMachine.parse_target("canceled") is TripStatus.CANCELED
        assert TripStateMachine.parse_target("requested") is None
        assert TripStateMachine.parse_target("bogus") is None


class TestOwnershipRules:
    def test_requester_cannot_change_own_status(self) -> None:
        trip = trip_starting_in(timedelta(days=30))
        with pytest.raises(SelfApprovalError):
            policy.ensure_not_requester(trip, trip.requester_id)

    def test_other_user_may_change_status(self) -> None:
        policy.ensure_not_requester(trip_starting_in(timedelta(days=30)), uuid4())

    def test_only_requester_may_cancel(self) -> None:
        trip = trip_starting_in(timedelta(days=30))
        policy.ensure_requester(trip, trip.requester_id)
        with pytest.raises(PermissionDeniedError):
            policy.ensure_requester(trip, uuid4())


class TestCancelWindow:
    """Граница окна отмены: строго меньше 7 суток запрещено."""

    def test_just_under_seven_days_blocked(self) -> None:
        trip = trip_starting_in(timedelta(days=7) - timedelta(microseconds=1))
        with pytest.raises(CancelWindowError):
            policy.ensure_cancel_window(trip, NOW)

    def test_exactly_seven_days_allowed(self) -> None:
        policy.ensure_cancel_window(trip_starting_in(timedelta(days=7)), NOW)

    def test_just_over_seven_days_allowed(self) -> None:
        policy.ensure_cancel_window(trip_starting_in(timedelta(days=7, seconds=1)), NOW)

    def test_trip_in_the_past_blocked(self) -> None:
        with pytest.raises(CancelWindowError):
            policy.ensure_cancel_window(trip_starting_in(timedelta(days=-1)), NOW)

    def test_window_constant(self) -> None:
        assert policy.CANCEL_WINDOW == timedelta(days=7)
