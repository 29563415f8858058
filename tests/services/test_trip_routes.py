# tests/services/test_trip_routes.py
"""
Тесты HTTP API Trip Service.
Движок работает на in-memory репозиториях, аутентификация через настоящие JWT.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.core.auth import JWTTokenManager, TokenRevocationStore
from src.services.errors import register_exception_handlers
from src.services.security import get_revocation_store, get_token_manager
from src.services.trip_service.dependencies import get_trip_engine
from src.services.trip_service.routes import parse_query_date, parse_query_status, router
from src.shared.models.enums import TripStatus

FIXED_NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)

tokens = JWTTokenManager("routes-secret")


@pytest.fixture
def client(engine, mock_redis) -> TestClient:
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(router, prefix="/api/v1")
    app.dependency_overrides[get_trip_engine] = lambda: engine
    app.dependency_overrides[get_token_manager] = lambda: tokens
    app.dependency_overrides[get_revocation_store] = lambda: TokenRevocationStore(mock_redis)
    return TestClient(app)


def auth(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {tokens.issue_token(user.id)}"}


def trip_body(days_out: int = 30, destination: str = "Lisbon") -> dict:
    start = FIXED_NOW + timedelta(days=days_out)
    return {
        "destination": destination,
        "start_date": start.isoformat(),
        "end_date": (start + timedelta(days=5)).isoformat(),
    }


def create(client, user, **kwargs) -> dict:
    response = client.post("/api/v1/trips", json=trip_body(**kwargs), headers=auth(user))
    assert response.status_code == 201
    return response.json()


class TestAuthentication:
    """Доступ без валидного токена."""

    def test_missing_header(self, client) -> None:
        response = client.get("/api/v1/trips")

        assert response.status_code == 401
        assert response.json() == {"error": "Authorization header is required"}

    def test_wrong_scheme(self, client, requester) -> None:
        token = tokens.issue_token(requester.id)
        response = client.get("/api/v1/trips", headers={"Authorization": f"Token {token}"})

        assert response.status_code == 401
        assert response.json() == {"error": "Authorization header format must be Bearer {token}"}

    def test_invalid_token(self, client) -> None:
        response = client.get("/api/v1/trips", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid or expired token"}

    def test_revoked_token(self, client, requester, mock_redis) -> None:
        mock_redis.exists.return_value = True

        response = client.get("/api/v1/trips", headers=auth(requester))

        assert response.status_code == 401
        assert response.json() == {"error": "Token has been revoked"}


class TestCreateTrip:
    def test_created(self, client, requester) -> None:
        body = create(client, requester)

        assert body["status"] == "requested"
        assert body["requester_id"] == str(requester.id)
        assert body["destination"] == "Lisbon"

    def test_domain_validation_lists_errors(self, client, requester, trip_repo) -> None:
        response = client.post("/api/v1/trips", json={}, headers=auth(requester))

        assert response.status_code == 400
        assert response.json()["errors"] == [
            "destination is required",
            "start_date is required",
            "end_date is required",
        ]
        assert trip_repo.trips == {}

    def test_null_fields_reach_domain_validation(self, client, requester, trip_repo) -> None:
        response = client.post(
            "/api/v1/trips",
            json={"destination": None, "start_date": None, "end_date": None},
            headers=auth(requester),
        )

        assert response.status_code == 400
        assert response.json()["errors"] == [
            "destination is required",
            "start_date is required",
            "end_date is required",
        ]
        assert trip_repo.trips == {}

    def test_malformed_body(self, client, requester) -> None:
        response = client.post(
            "/api/v1/trips",
            json={"destination": "Lisbon", "start_date": "tomorrow"},
            headers=auth(requester),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "invalid request"


class TestReadTrips:
    def test_get_by_id(self, client, requester, approver) -> None:
        trip = create(client, requester)

        response = client.get(f"/api/v1/trips/{trip['id']}", headers=auth(approver))

        assert response.status_code == 200
        assert response.json()["id"] == trip["id"]

    def test_invalid_id(self, client, requester) -> None:
        response = client.get("/api/v1/trips/not-a-uuid", headers=auth(requester))

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid trip ID format"}

    def test_not_found(self, client, requester) -> None:
        response = client.get(f"/api/v1/trips/{uuid4()}", headers=auth(requester))

        assert response.status_code == 404
        assert response.json() == {"error": "trip not found"}

    def test_list_only_own_trips(self, client, requester, approver) -> None:
        own = create(client, requester)
        create(client, approver, destination="Rome")

        response = client.get("/api/v1/trips", headers=auth(requester))

        assert response.status_code == 200
        assert [t["id"] for t in response.json()] == [own["id"]]

    def test_list_filters(self, client, requester, approver) -> None:
        lisbon = create(client, requester, destination="Lisbon")
        create(client, requester, destination="Paris")
        client.patch(
            f"/api/v1/trips/{lisbon['id']}/status",
            json={"status": "approved"},
            headers=auth(approver),
        )

        approved = client.get("/api/v1/trips?status=approved", headers=auth(requester)).json()
        by_name = client.get("/api/v1/trips?destination=PAR", headers=auth(requester)).json()
        bogus_status = client.get("/api/v1/trips?status=bogus", headers=auth(requester)).json()

        assert [t["id"] for t in approved] == [lisbon["id"]]
        assert [t["destination"] for t in by_name] == ["Paris"]
        assert len(bogus_status) == 2

    def test_list_date_filters(self, client, requester) -> None:
        create(client, requester, days_out=10, destination="Near")
        create(client, requester, days_out=60, destination="Far")

        after = (FIXED_NOW + timedelta(days=30)).strftime("%Y-%m-%d")
        response = client.get(f"/api/v1/trips?start_date={after}", headers=auth(requester))
        ignored = client.get("/api/v1/trips?start_date=31-12-2025", headers=auth(requester))

        assert [t["destination"] for t in response.json()] == ["Far"]
        assert len(ignored.json()) == 2


class TestStatusChanges:
    """PATCH /status и POST /cancel."""

    def test_approve(self, client, requester, approver, trip_repo) -> None:
        trip = create(client, requester)

        response = client.patch(
            f"/api/v1/trips/{trip['id']}/status",
            json={"status": "approved"},
            headers=auth(approver),
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Trip status updated successfully"}
        assert trip_repo.trips[UUID(trip["id"])].status == TripStatus.APPROVED

    def test_self_approval_forbidden(self, client, requester) -> None:
        trip = create(client, requester)

        response = client.patch(
            f"/api/v1/trips/{trip['id']}/status",
            json={"status": "approved"},
            headers=auth(requester),
        )

        assert response.status_code == 403
        assert response.json() == {"error": "you cannot approve or cancel your own trip"}

    def test_invalid_status_value(self, client, requester, approver) -> None:
        trip = create(client, requester)

        response = client.patch(
            f"/api/v1/trips/{trip['id']}/status",
            json={"status": "bogus"},
            headers=auth(approver),
        )

        assert response.status_code == 403

    def test_missing_status_field(self, client, requester, approver) -> None:
        trip = create(client, requester)

        response = client.patch(f"/api/v1/trips/{trip['id']}/status", json={}, headers=auth(approver))

        assert response.status_code == 400

    def test_cancel_flow(self, client, requester, approver) -> None:
        trip = create(client, requester, days_out=30)
        client.patch(
            f"/api/v1/trips/{trip['id']}/status",
            json={"status": "approved"},
            headers=auth(approver),
        )

        by_other = client.post(f"/api/v1/trips/{trip['id']}/cancel", headers=auth(approver))
        by_owner = client.post(f"/api/v1/trips/{trip['id']}/cancel", headers=auth(requester))
        again = client.post(f"/api/v1/trips/{trip['id']}/cancel", headers=auth(requester))

        assert by_other.status_code == 403
        assert by_owner.status_code == 200
        assert by_owner.json() == {"message": "Trip cancellation successful"}
        assert again.status_code == 403

    def test_cancel_inside_window(self, client, requester, approver) -> None:
        trip = create(client, requester, days_out=3)
        client.patch(
            f"/api/v1/trips/{trip['id']}/status",
            json={"status": "approved"},
            headers=auth(approver),
        )

        response = client.post(f"/api/v1/trips/{trip['id']}/cancel", headers=auth(requester))

        assert response.status_code == 403
        assert response.json() == {"error": "cannot cancel a trip that starts in 7 days or less"}


def test_parse_query_helpers() -> None:
    assert parse_query_date("2025-03-10") == FIXED_NOW.replace(day=10, hour=0)
    assert parse_query_date("10/03/2025") is None
    assert parse_query_date(None) is None
    assert parse_query_status("canceled") is TripStatus.CANCELED
    assert parse_query_status("unknown") is None
