# src/shared/models/__init__.py
"""
Общие DTO и Pydantic-модели для межсервисного взаимодействия.
"""

from src.shared.models.enums import TripStatus
from src.shared.models.trip_dto import (
    TripDTO,
    CreateTripRequest,
    UpdateTripStatusRequest,
    TripListQuery,
)
from src.shared.models.user_dto import (
    UserDTO,
    RegisterRequest,
    LoginRequest,
    TokenResponse,
)
from src.shared.models.common import (
    ErrorResponse,
    MessageResponse,
    HealthStatus,
)

__all__ = [
    # Enums
    "TripStatus",
    # Trip
    "TripDTO",
    "CreateTripRequest",
    "UpdateTripStatusRequest",
    "TripListQuery",
    # User
    "UserDTO",
    "RegisterRequest",
    "LoginRequest",
    "TokenResponse",
    # Common
    "ErrorResponse",
    "MessageResponse",
    "HealthStatus",
]
