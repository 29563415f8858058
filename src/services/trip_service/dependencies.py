# src/services/trip_service/dependencies.py
"""
Dependency Injection для Trip Service.
"""

from fastapi import Depends

from src.core.notifications import NotificationService, Notifier
from src.core.trips import PostgresTripRepository, TripLifecycleEngine, TripRepository
from src.core.users import PostgresUserRepository, UserRepository
from src.infra.database import DatabaseManager
from src.infra.event_bus import EventBus, get_event_bus


def get_database() -> DatabaseManager:
    return DatabaseManager()


def get_trip_repository(db: DatabaseManager = Depends(get_database)) -> TripRepository:
    return PostgresTripRepository(db)


def get_user_repository(db: DatabaseManager = Depends(get_database)) -> UserRepository:
    return PostgresUserRepository(db)


def get_notifier(event_bus: EventBus = Depends(get_event_bus)) -> Notifier:
    return NotificationService(event_bus)


def get_trip_engine(
    trips: TripRepository = Depends(get_trip_repository),
    users: UserRepository = Depends(get_user_repository),
    notifier: Notifier = Depends(get_notifier),
    event_bus: EventBus = Depends(get_event_bus),
) -> TripLifecycleEngine:
    return TripLifecycleEngine(trips, users, notifier, event_bus=event_bus)
