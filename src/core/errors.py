# src/core/errors.py
"""
Доменные исключения.

Каждое исключение несёт вид ошибки (ErrorKind). HTTP-слой выбирает код ответа
по виду ошибки, а не по конкретному классу исключения.

Usage:
    from src.core.errors import ErrorKind, NotFoundError

    try:
        ...
    except TripApprovalError as e:
        status = HTTP_STATUS_BY_KIND[e.kind]
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable


class ErrorKind(str, Enum):
    """Вид доменной ошибки."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    SELF_APPROVAL = "self_approval"
    INVALID_STATUS = "invalid_status"
    CANCEL_WINDOW = "cancel_window"
    DUPLICATE_USER = "duplicate_user"
    INVALID_CREDENTIALS = "invalid_credentials"
    STATUS_CONFLICT = "status_conflict"
    AUTHENTICATION = "authentication"
    PERSISTENCE = "persistence"

    def __str__(self) -> str:
        return self.value


HTTP_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.PERMISSION_DENIED: 403,
    ErrorKind.SELF_APPROVAL: 403,
    ErrorKind.INVALID_STATUS: 403,
    ErrorKind.CANCEL_WINDOW: 403,
    ErrorKind.DUPLICATE_USER: 409,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.STATUS_CONFLICT: 409,
    ErrorKind.AUTHENTICATION: 401,
    ErrorKind.PERSISTENCE: 500,
}


class TripApprovalError(Exception):
    """Базовое исключение приложения."""

    kind: ErrorKind = ErrorKind.PERSISTENCE
    default_message: str = "internal error"

    def __init__(self, message: str | None = None, kind: ErrorKind | None = None) -> None:
        self.message = message or self.default_message
        if kind is not None:
            self.kind = kind
        super().__init__(self.message)

    @property
    def http_status(self) -> int:
        return HTTP_STATUS_BY_KIND.get(self.kind, 500)


class ValidationError(TripApprovalError):
    """Нарушены правила валидации. Содержит полный список нарушений."""

    kind = ErrorKind.VALIDATION

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors = list(errors)
        super().__init__("Validation errors: " + "; ".join(self.errors))


class NotFoundError(TripApprovalError):
    kind = ErrorKind.NOT_FOUND
    default_message = "trip not found"


class PermissionDeniedError(TripApprovalError):
    kind = ErrorKind.PERMISSION_DENIED
    default_message = "permission denied"


class SelfApprovalError(TripApprovalError):
    """Автор заявки пытается изменить её статус."""

    kind = ErrorKind.SELF_APPROVAL
    default_message = "you cannot approve or cancel your own trip"


class InvalidStatusError(TripApprovalError):
    kind = ErrorKind.INVALID_STATUS
    default_message = "invalid status for this operation"


class CancelWindowError(TripApprovalError):
    """До начала поездки осталось меньше недели."""

    kind = ErrorKind.CANCEL_WINDOW
    default_message = "cannot cancel a trip that starts in 7 days or less"


class DuplicateUserError(TripApprovalError):
    kind = ErrorKind.DUPLICATE_USER
    default_message = "user with this email already exists"


class InvalidCredentialsError(TripApprovalError):
    kind = ErrorKind.INVALID_CREDENTIALS
    default_message = "invalid credentials"


class StatusConflictError(TripApprovalError):
    """Статус поездки изменился параллельным запросом между чтением и записью."""

    kind = ErrorKind.STATUS_CONFLICT
    default_message = "trip status was changed concurrently, retry the request"


class AuthenticationError(TripApprovalError):
    """Не удалось определить вызывающего пользователя по токену."""

    kind = ErrorKind.AUTHENTICATION
    default_message = "Invalid or expired token"


class PersistenceError(TripApprovalError):
    """Сбой хранилища. Пробрасывается без изменений."""

    kind = ErrorKind.PERSISTENCE
    default_message = "persistence failure"
