# src/core/users/service.py
"""
Сервис пользователей: регистрация, аутентификация, получение профиля.
"""

from __future__ import annotations

from uuid import UUID

from src.common.constants import TypeMsg
from src.common.logger import log_info
from src.core.errors import (
    DuplicateUserError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from src.core.users.models import User
from src.core.users.repository import UserRepository
from src.core.users.security import hash_password, verify_password


class UserService:
    """Сервис пользователей."""

    def __init__(self, users: UserRepository) -> None:
        """
        Args:
            users: Репозиторий пользователей
        """
        self._users = users

    async def register(self, name: str, email: str, password: str) -> User:
        """
        Регистрирует пользователя.

        Raises:
            DuplicateUserError: email уже занят
            ValidationError: некорректные имя или email
        """
        if await self._users.find_by_email(email) is not None:
            raise DuplicateUserError()

        user = User(name=name, email=email, password_hash=hash_password(password))
        errors = user.validation_errors()
        if errors:
            raise ValidationError(errors)

        created = await self._users.create(user)
        await log_info(f"Зарегистрирован пользователь {created.id}", type_msg=TypeMsg.INFO)
        return created

    async def authenticate(self, email: str, password: str) -> User:
        """
        Проверяет email и пароль.
        Неизвестный email и неверный пароль дают одну и ту же ошибку.
        """
        user = await self._users.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()
        return user

    async def get_user(self, user_id: UUID) -> User:
        user = await self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("user not found")
        return user
