# src/core/__init__.py
"""
Доменный слой (Core Domain).
Бизнес-логика согласования поездок, независимая от транспорта.
"""

from src.core.errors import ErrorKind, TripApprovalError
from src.core.users import User, UserService
from src.core.trips import Trip, TripLifecycleEngine

__all__ = [
    "ErrorKind",
    "TripApprovalError",
    "User",
    "UserService",
    "Trip",
    "TripLifecycleEngine",
]
