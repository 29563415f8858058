# src/core/trips/repository.py
"""
Репозиторий поездок.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

import asyncpg

from src.common.logger import log_error
from src.core.errors import PersistenceError, StatusConflictError
from src.core.trips.models import Trip, TripFilter
from src.infra.database import CONNECTION_ERRORS, DatabaseManager
from src.shared.models.enums import TripStatus

DB_ERRORS: tuple[type[BaseException], ...] = (asyncpg.PostgresError, *CONNECTION_ERRORS)

TRIP_COLUMNS = """
    id, requester_id, destination, start_date, end_date, status, created_at, updated_at
"""


class TripRepository(ABC):
    """Порт хранения поездок."""

    @abstractmethod
    async def create(self, trip: Trip) -> Trip:
        ...

    @abstractmethod
    async def find_by_id(self, trip_id: UUID) -> Optional[Trip]:
        ...

    @abstractmethod
    async def list(self, trip_filter: TripFilter) -> list[Trip]:
        ...

    @abstractmethod
    async def update_status(
        self,
        trip_id: UUID,
        status: TripStatus,
        expected_status: TripStatus,
        updated_at: datetime,
    ) -> None:
        """
        Атомарно меняет статус и updated_at, если статус всё ещё равен expected_status.

        Raises:
            StatusConflictError: статус уже изменён другим запросом
        """


class PostgresTripRepository(TripRepository):
    """Реализация на PostgreSQL (asyncpg)."""

    def __init__(self, db: DatabaseManager) -> None:
        """
        Args:
            db: Менеджер базы данных (Dependency Injection)
        """
        self._db = db

    async def create(self, trip: Trip) -> Trip:
        try:
            await self._db.execute(
                """
                INSERT INTO trip_approval.trips (
                    id, requester_id, destination, start_date, end_date,
                    status, created_at, updated_at
                )
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
                """,
                trip.id,
                trip.requester_id,
                trip.destination,
                trip.start_date,
                trip.end_date,
                str(trip.status),
                trip.created_at,
                trip.updated_at,
            )
        except DB_ERRORS as e:
            await log_error(f"Ошибка создания поездки {trip.id}: {e}")
            raise PersistenceError(f"failed to create trip: {e}") from e

        return trip

    async def find_by_id(self, trip_id: UUID) -> Optional[Trip]:
        try:
            row = await self._db.fetchrow(
                f"SELECT {TRIP_COLUMNS} FROM trip_approval.trips WHERE id = $1",
                trip_id,
            )
        except DB_ERRORS as e:
            await log_error(f"Ошибка получения поездки {trip_id}: {e}")
            raise PersistenceError(f"failed to get trip: {e}") from e

        if row is None:
            return None
        return self._row_to_trip(row)

    async def list(self, trip_filter: TripFilter) -> list[Trip]:
        query, args = self._build_list_query(trip_filter)
        try:
            rows = await self._db.fetch(query, *args)
        except DB_ERRORS as e:
            await log_error(f"Ошибка получения списка поездок: {e}")
            raise PersistenceError(f"failed to list trips: {e}") from e

        return [self._row_to_trip(row) for row in rows]

    async def update_status(
        self,
        trip_id: UUID,
        status: TripStatus,
        expected_status: TripStatus,
        updated_at: datetime,
    ) -> None:
        try:
            result = await self._db.execute(
                """
                UPDATE trip_approval.trips
                SET status = $2, updated_at = $4
                WHERE id = $1 AND status = $3
                """,
                trip_id,
                str(status),
                str(expected_status),
                updated_at,
            )
        except DB_ERRORS as e:
            await log_error(f"Ошибка обновления статуса поездки {trip_id}: {e}")
            raise PersistenceError(f"failed to update trip status: {e}") from e

        # asyncpg возвращает статус команды вида "UPDATE <n>"
        if result.split()[-1] == "0":
            raise StatusConflictError()

    @staticmethod
    def _build_list_query(trip_filter: TripFilter) -> tuple[str, list[Any]]:
        """Собирает SELECT с условиями только по заданным полям фильтра."""
        conditions: list[str] = []
        args: list[Any] = []

        def add(condition: str, value: Any) -> None:
            args.append(value)
            conditions.append(condition.format(n=len(args)))

        if trip_filter.requester_id is not None:
            add("requester_id = ${n}", trip_filter.requester_id)
        if trip_filter.status is not None:
            add("status = ${n}", str(trip_filter.status))
        if trip_filter.destination:
            add("destination ILIKE ${n}", f"%{_escape_like(trip_filter.destination)}%")
        if trip_filter.start_date is not None:
            add("start_date >= ${n}", trip_filter.start_date)
        if trip_filter.end_date is not None:
            add("end_date <= ${n}", trip_filter.end_date)

        query = f"SELECT {TRIP_COLUMNS} FROM trip_approval.trips WHERE 1=1"
        for condition in conditions:
            query += f" AND {condition}"
        query += " ORDER BY created_at DESC, id"
        return query, args

    def _row_to_trip(self, row) -> Trip:
        """Конвертирует строку БД в модель Trip."""
        return Trip(
            id=row["id"],
            requester_id=row["requester_id"],
            destination=row["destination"],
            start_date=row["start_date"],
            end_date=row["end_date"],
            status=row["status"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
