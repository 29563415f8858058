# tests/core/test_errors.py
"""
Тесты доменных исключений и их HTTP-кодов.
"""

import pytest

from src.core.errors import (
    HTTP_STATUS_BY_KIND,
    AuthenticationError,
    CancelWindowError,
    DuplicateUserError,
    ErrorKind,
    InvalidCredentialsError,
    InvalidStatusError,
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
    SelfApprovalError,
    StatusConflictError,
    TripApprovalError,
    ValidationError,
)


@pytest.mark.parametrize("error_cls, status", [
    (NotFoundError, 404),
    (PermissionDeniedError, 403),
    (SelfApprovalError, 403),
    (InvalidStatusError, 403),
    (CancelWindowError, 403),
    (DuplicateUserError, 409),
    (InvalidCredentialsError, 401),
    (StatusConflictError, 409),
    (AuthenticationError, 401),
    (PersistenceError, 500),
])
def test_http_status(error_cls, status) -> None:
    error = error_cls()

    assert isinstance(error, TripApprovalError)
    assert error.http_status == status


def test_every_kind_has_status() -> None:
    assert set(HTTP_STATUS_BY_KIND) == set(ErrorKind)


def test_validation_error_keeps_all_messages() -> None:
    error = ValidationError(["destination is required", "end_date is required"])

    assert error.kind == ErrorKind.VALIDATION
    assert error.http_status == 400
    assert error.errors == ["destination is required", "end_date is required"]
    assert str(error) == "Validation errors: destination is required; end_date is required"


def test_custom_message_and_kind() -> None:
    error = TripApprovalError("custom", kind=ErrorKind.NOT_FOUND)

    assert error.message == "custom"
    assert error.http_status == 404
    assert NotFoundError().message == "trip not found"
