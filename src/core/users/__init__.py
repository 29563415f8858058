# src/core/users/__init__.py
"""
Домен пользователей.
"""

from src.core.users.models import User
from src.core.users.service import UserService
from src.core.users.repository import UserRepository, PostgresUserRepository

__all__ = [
    "User",
    "UserService",
    "UserRepository",
    "PostgresUserRepository",
]
