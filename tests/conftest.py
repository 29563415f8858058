# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Optional
from unittest.mock import AsyncMock
from uuid import UUID

import pytest

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("DB_PASSWORD", "test_password")
os.environ.setdefault("REDIS_PASSWORD", "")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from src.core.errors import StatusConflictError
from src.core.notifications.service import Notifier
from src.core.trips.models import Trip, TripFilter
from src.core.trips.repository import TripRepository
from src.core.trips.service import TripLifecycleEngine
from src.core.users.models import User
from src.core.users.repository import UserRepository
from src.shared.models.enums import TripStatus

FIXED_NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# IN-MEMORY РЕАЛИЗАЦИИ ПОРТОВ
# =============================================================================

class InMemoryTripRepository(TripRepository):
    """Хранилище поездок в памяти с той же семантикой условной записи, что и у PostgreSQL."""

    def __init__(self) -> None:
        self.trips: dict[UUID, Trip] = {}
        self.status_updates: list[tuple[UUID, TripStatus]] = []

    async def create(self, trip: Trip) -> Trip:
        self.trips[trip.id] = trip.model_copy()
        return trip

    async def find_by_id(self, trip_id: UUID) -> Optional[Trip]:
        trip = self.trips.get(trip_id)
        return trip.model_copy() if trip else None

    async def list(self, trip_filter: TripFilter) -> list[Trip]:
        matched = [t.model_copy() for t in self.trips.values() if trip_filter.matches(t)]
        matched.sort(key=lambda t: str(t.id))
        matched.sort(key=lambda t: t.created_at, reverse=True)
        return matched

    async def update_status(
        self,
        trip_id: UUID,
        status: TripStatus,
        expected_status: TripStatus,
        updated_at: datetime,
    ) -> None:
        trip = self.trips.get(trip_id)
        if trip is None or trip.status != expected_status:
            raise StatusConflictError()
        self.trips[trip_id] = trip.model_copy(update={"status": status.value, "updated_at": updated_at})
        self.status_updates.append((trip_id, status))


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self.users: dict[UUID, User] = {}

    async def create(self, user: User) -> User:
        self.users[user.id] = user
        return user

    async def find_by_email(self, email: str) -> Optional[User]:
        for user in self.users.values():
            if user.email == email:
                return user
        return None

    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        return self.users.get(user_id)


class RecordingNotifier(Notifier):
    """Запоминает отправленные уведомления."""

    def __init__(self) -> None:
        self.sent: list[tuple[User, Trip, str]] = []

    async def notify(self, user: User, trip: Trip, message: str) -> bool:
        self.sent.append((user, trip, message))
        return True


class FrozenClock:
    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    """Путь к файлу конфигурации."""
    return project_root / "config" / "config.json"


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Мок конфигурации для тестов."""
    return {
        "PROJECT_NAME": "trip_approval_test",
        "VERSION": "1.0.0-test",
        "DEBUG": True,
        "LOG_LEVEL": "DEBUG",
        "ENVIRONMENT": "test",
        "COMPONENT_MODE": "",
        "USERS_SERVICE_HOST": "127.0.0.1",
        "USERS_SERVICE_PORT": 9084,
        "TRIP_SERVICE_HOST": "127.0.0.1",
        "TRIP_SERVICE_PORT": 9085,
        "LOG_TO_FILE": False,
        "LOG_FILE_PATH": "logs/test.log",
        "LOG_FORMAT": "colored",
        "LOG_MAX_BYTES": 1048576,
        "LOG_BACKUP_COUNT": 2,
        "DB_HOST": "localhost",
        "DB_PORT": 5432,
        "DB_NAME": "trip_approval_test",
        "DB_USER": "postgres",
        "DB_PASSWORD": "test_password",
        "DB_MIN_POOL_SIZE": 2,
        "DB_MAX_POOL_SIZE": 5,
        "DB_COMMAND_TIMEOUT": 30,
        "REDIS_HOST": "localhost",
        "REDIS_PORT": 6379,
        "REDIS_DB": 1,
        "REDIS_PASSWORD": "",
        "REDIS_NAMESPACE": "trips_test",
        "REDIS_MAX_CONNECTIONS": 10,
        "RABBITMQ_HOST": "localhost",
        "RABBITMQ_PORT": 5672,
        "RABBITMQ_USER": "guest",
        "RABBITMQ_PASSWORD": "guest",
        "RABBITMQ_VHOST": "/",
        "RABBITMQ_EXCHANGE": "trips.test",
        "RABBITMQ_PREFETCH_COUNT": 5,
        "JWT_SECRET_KEY": "",
        "JWT_ALGORITHM": "HS256",
        "JWT_EXPIRATION_HOURS": 24,
        "REVOKED_TOKEN_FALLBACK_TTL": 3600,
        "_comment_auth": "секрет берётся из окружения",
    }


@pytest.fixture
def temp_config_file(tmp_path: Path, mock_config: dict[str, Any]) -> Path:
    """Создаёт временный файл конфигурации."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps(mock_config, ensure_ascii=False, indent=2))
    return config_file


# =============================================================================
# ФИКСТУРЫ ИНФРАСТРУКТУРЫ (МОКИ)
# =============================================================================

@pytest.fixture
def mock_db() -> AsyncMock:
    """Мок менеджера базы данных."""
    db = AsyncMock()
    db.fetchrow = AsyncMock(return_value=None)
    db.fetch = AsyncMock(return_value=[])
    db.execute = AsyncMock(return_value="INSERT 0 1")
    db.fetchval = AsyncMock(return_value=None)
    return db


@pytest.fixture
def mock_redis() -> AsyncMock:
    """Мок клиента Redis."""
    redis = AsyncMock()
    redis.set = AsyncMock(return_value=True)
    redis.exists = AsyncMock(return_value=False)
    return redis


@pytest.fixture
def mock_event_bus() -> AsyncMock:
    """Мок шины событий."""
    event_bus = AsyncMock()
    event_bus.publish = AsyncMock(return_value=True)
    event_bus.subscribe = AsyncMock(return_value=None)
    event_bus.is_connected = True
    return event_bus


# =============================================================================
# ФИКСТУРЫ ДОМЕНА
# =============================================================================

@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def trip_repo() -> InMemoryTripRepository:
    return InMemoryTripRepository()


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def requester(user_repo: InMemoryUserRepository) -> User:
    """Пользователь A: автор заявок."""
    user = User(name="Alice", email="alice@example.com", password_hash="pbkdf2_sha256$1$00$00")
    user_repo.users[user.id] = user
    return user


@pytest.fixture
def approver(user_repo: InMemoryUserRepository) -> User:
    """Пользователь B: согласующий."""
    user = User(name="Bob", email="bob@example.com", password_hash="pbkdf2_sha256$1$00$00")
    user_repo.users[user.id] = user
    return user


@pytest.fixture
def engine(
    trip_repo: InMemoryTripRepository,
    user_repo: InMemoryUserRepository,
    notifier: RecordingNotifier,
    mock_event_bus: AsyncMock,
    clock: FrozenClock,
) -> TripLifecycleEngine:
    return TripLifecycleEngine(trip_repo, user_repo, notifier, event_bus=mock_event_bus, clock=clock)
