from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from src.shared.models.enums import TripStatus


class TripDTO(BaseModel):
    id: UUID
    requester_id: UUID
    destination: str
    start_date: datetime
    end_date: datetime
    status: TripStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CreateTripRequest(BaseModel):
    # Поля необязательны на уровне схемы: полную валидацию со списком ошибок делает домен
    destination: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class UpdateTripStatusRequest(BaseModel):
    status: str


class TripListQuery(BaseModel):
    """Сырые query-параметры GET /trips (даты в формате YYYY-MM-DD)."""
    status: Optional[str] = None
    destination: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
