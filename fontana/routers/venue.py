from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..config import Settings, Venue, get_settings, get_venue
from ..deps import get_availability_gateway
from ..domain.gateways import AvailabilityGateway
from ..domain.services import build_quote
from ..schemas import QuoteRead, VenueRead
from ..usecases.availability import lookup_availability

router = APIRouter(prefix="", tags=["venue"])


@router.get("/sectors", response_model=VenueRead)
async def list_sectors(venue: Venue = Depends(get_venue)) -> VenueRead:
    return VenueRead.from_venue(venue)


@router.get("/quote", response_model=QuoteRead)
async def get_quote(
    vehiculos: int = Query(default=1, ge=0),
    personas: int = Query(default=1, ge=0),
    fecha: Optional[date] = Query(default=None),
    sector: Optional[str] = Query(default=None),
    venue: Venue = Depends(get_venue),
    settings: Settings = Depends(get_settings),
    gateway: AvailabilityGateway = Depends(get_availability_gateway),
) -> QuoteRead:
    availability = None
    if fecha is not None and sector:
        availability = await lookup_availability(
            gateway,
            venue,
            day=fecha,
            sector_id=sector,
            policy=settings.availability_fallback,
        )
    quote = build_quote(venue, vehicles=vehiculos, persons=personas, availability=availability)
    return QuoteRead.from_quote(quote)
