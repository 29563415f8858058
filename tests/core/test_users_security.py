# tests/core/test_users_security.py
"""
Тесты хэширования паролей.
"""

import pytest

from src.core.users.security import ALGORITHM, hash_password, verify_password


def test_hash_format() -> None:
    hashed = hash_password("password123", iterations=1000)

    algorithm, iterations, salt, digest = hashed.split("$")
    assert algorithm == ALGORITHM
    assert iterations == "1000"
    assert len(salt) == 32
    assert len(digest) == 64


def test_salt_differs_between_calls() -> None:
    assert hash_password("password123", iterations=1000) != hash_password("password123", iterations=1000)


def test_verify_roundtrip() -> None:
    hashed = hash_password("password123", iterations=1000)

    assert verify_password("password123", hashed)
    assert not verify_password("password124", hashed)


@pytest.mark.parametrize("bad_hash", [
    "",
    "plain-text",
    "md5$1000$00$00",
    "pbkdf2_sha256$many$00$00",
    "pbkdf2_sha256$1000$zz$00",
])
def test_malformed_hash_rejected(bad_hash: str) -> None:
    assert verify_password("password123", bad_hash) is False
