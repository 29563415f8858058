# src/core/trips/__init__.py
"""
Домен поездок.
Модели, правила переходов статусов и сервис жизненного цикла заявки.
"""

from src.core.trips.models import Trip, TripFilter
from src.core.trips.repository import TripRepository, PostgresTripRepository
from src.core.trips.service import TripLifecycleEngine

__all__ = [
    "Trip",
    "TripFilter",
    "TripRepository",
    "PostgresTripRepository",
    "TripLifecycleEngine",
]
