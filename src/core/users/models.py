# src/core/users/models.py
"""
Модели данных пользователей.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(BaseModel):
    """Модель пользователя."""

    id: UUID = Field(default_factory=uuid4, description="UUID пользователя")
    name: str = Field("", description="Отображаемое имя")
    email: str = Field("", description="Email, уникален")
    password_hash: str = Field("", description="Хэш пароля")

    created_at: datetime = Field(default_factory=_utc_now, description="Дата регистрации")
    updated_at: datetime = Field(default_factory=_utc_now, description="Дата обновления")

    class Config:
        from_attributes = True

    def validation_errors(self) -> list[str]:
        """Возвращает все нарушенные правила."""
        errors: list[str] = []

        if not self.name.strip():
            errors.append("name is required")

        if not self.email:
            errors.append("email is required")
        elif self.email != self.email.strip():
            errors.append("email cannot contain leading or trailing spaces")
        elif not EMAIL_PATTERN.match(self.email):
            errors.append("invalid email format")

        if not self.password_hash:
            errors.append("password_hash is required")

        return errors
