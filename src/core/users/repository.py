# src/core/users/repository.py
"""
Репозиторий пользователей.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

import asyncpg

from src.common.logger import log_error
from src.core.errors import DuplicateUserError, PersistenceError
from src.core.users.models import User
from src.infra.database import CONNECTION_ERRORS, DatabaseManager

DB_ERRORS: tuple[type[BaseException], ...] = (asyncpg.PostgresError, *CONNECTION_ERRORS)

USER_COLUMNS = "id, name, email, password_hash, created_at, updated_at"


class UserRepository(ABC):
    """Порт хранения пользователей."""

    @abstractmethod
    async def create(self, user: User) -> User:
        ...

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        ...


class PostgresUserRepository(UserRepository):
    """Реализация на PostgreSQL (asyncpg)."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def create(self, user: User) -> User:
        try:
            await self._db.execute(
                """
                INSERT INTO trip_approval.users (id, name, email, password_hash, created_at, updated_at)
                VALUES ($1, $2, $3, $4, $5, $6)
                """,
                user.id,
                user.name,
                user.email,
                user.password_hash,
                user.created_at,
                user.updated_at,
            )
        except asyncpg.UniqueViolationError as e:
            # Параллельная регистрация с тем же email
            raise DuplicateUserError() from e
        except DB_ERRORS as e:
            await log_error(f"Ошибка создания пользователя {user.email}: {e}")
            raise PersistenceError(f"failed to create user: {e}") from e

        return user

    async def find_by_email(self, email: str) -> Optional[User]:
        try:
            row = await self._db.fetchrow(
                f"SELECT {USER_COLUMNS} FROM trip_approval.users WHERE email = $1",
                email,
            )
        except DB_ERRORS as e:
            await log_error(f"Ошибка поиска пользователя по email {email}: {e}")
            raise PersistenceError(f"failed to get user: {e}") from e

        return self._row_to_user(row) if row else None

    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        try:
            row = await self._db.fetchrow(
                f"SELECT {USER_COLUMNS} FROM trip_approval.users WHERE id = $1",
                user_id,
            )
        except DB_ERRORS as e:
            await log_error(f"Ошибка получения пользователя {user_id}: {e}")
            raise PersistenceError(f"failed to get user: {e}") from e

        return self._row_to_user(row) if row else None

    def _row_to_user(self, row) -> User:
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
