from datetime import date

from fastapi import APIRouter, Depends, Query

from ..config import Settings, Venue, get_settings, get_venue
from ..deps import get_availability_gateway
from ..domain.gateways import AvailabilityGateway
from ..schemas import AvailabilityRead
from ..usecases.availability import lookup_availability

router = APIRouter(prefix="", tags=["availability"])


@router.get("/availability", response_model=AvailabilityRead)
async def get_availability(
    day: date = Query(..., alias="date", description="YYYY-MM-DD"),
    sector: str = Query(..., min_length=1),
    venue: Venue = Depends(get_venue),
    settings: Settings = Depends(get_settings),
    gateway: AvailabilityGateway = Depends(get_availability_gateway),
) -> AvailabilityRead:
    snapshot = await lookup_availability(
        gateway,
        venue,
        day=day,
        sector_id=sector,
        policy=settings.availability_fallback,
    )
    return AvailabilityRead.from_snapshot(snapshot)
