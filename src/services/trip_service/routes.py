from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from src.common.constants import QUERY_DATE_FORMAT
from src.core.trips import TripFilter, TripLifecycleEngine
from src.services.security import get_current_user_id
from src.services.trip_service.dependencies import get_trip_engine
from src.shared.models.common import MessageResponse
from src.shared.models.enums import TripStatus
from src.shared.models.trip_dto import CreateTripRequest, TripDTO, TripListQuery, UpdateTripStatusRequest

router = APIRouter(prefix="/trips", tags=["Trips"])


def parse_trip_id(trip_id: str) -> UUID:
    try:
        return UUID(trip_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid trip ID format")


def parse_query_date(value: Optional[str]) -> Optional[datetime]:
    """YYYY-MM-DD -> полночь UTC. Некорректная дата игнорируется."""
    if not value:
        return None
    try:
        return datetime.strptime(value, QUERY_DATE_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        return None


def parse_query_status(value: Optional[str]) -> Optional[TripStatus]:
    if not value:
        return None
    try:
        return TripStatus(value)
    except ValueError:
        return None


@router.post("", response_model=TripDTO, status_code=status.HTTP_201_CREATED)
async def create_trip(
    request: CreateTripRequest,
    user_id: UUID = Depends(get_current_user_id),
    engine: TripLifecycleEngine = Depends(get_trip_engine),
):
    trip = await engine.create_trip(
        requester_id=user_id,
        destination=request.destination,
        start_date=request.start_date,
        end_date=request.end_date,
    )
    return TripDTO.model_validate(trip)


@router.get("", response_model=list[TripDTO])
async def list_trips(
    query: TripListQuery = Depends(),
    user_id: UUID = Depends(get_current_user_id),
    engine: TripLifecycleEngine = Depends(get_trip_engine),
):
    """Заявки текущего пользователя с необязательными фильтрами."""
    trip_filter = TripFilter(
        requester_id=user_id,
        status=parse_query_status(query.status),
        destination=query.destination or None,
        start_date=parse_query_date(query.start_date),
        end_date=parse_query_date(query.end_date),
    )
    trips = await engine.list_trips(trip_filter)
    return [TripDTO.model_validate(trip) for trip in trips]


@router.get("/{trip_id}", response_model=TripDTO)
async def get_trip(
    trip_id: str,
    user_id: UUID = Depends(get_current_user_id),
    engine: TripLifecycleEngine = Depends(get_trip_engine),
):
    trip = await engine.get_trip(parse_trip_id(trip_id), user_id)
    return TripDTO.model_validate(trip)


@router.patch("/{trip_id}/status", response_model=MessageResponse)
async def update_trip_status(
    trip_id: str,
    request: UpdateTripStatusRequest,
    user_id: UUID = Depends(get_current_user_id),
    engine: TripLifecycleEngine = Depends(get_trip_engine),
):
    await engine.update_trip_status(parse_trip_id(trip_id), user_id, request.status)
    return MessageResponse(message="Trip status updated successfully")


@router.post("/{trip_id}/cancel", response_model=MessageResponse)
async def cancel_trip(
    trip_id: str,
    user_id: UUID = Depends(get_current_user_id),
    engine: TripLifecycleEngine = Depends(get_trip_engine),
):
    """Отмена согласованной заявки её автором."""
    await engine.cancel_approved_trip(parse_trip_id(trip_id), user_id)
    return MessageResponse(message="Trip cancellation successful")
