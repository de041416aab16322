import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from ..config import Settings, Venue, get_settings, get_venue
from ..deps import get_availability_gateway, get_reservation_gateway
from ..domain.errors import ReservationRejectedError, SubmissionFailedError
from ..domain.gateways import AvailabilityGateway, ReservationGateway
from ..domain.services import total_amount, validate_reservation
from ..schemas import ReservationCreate, SubmissionRead
from ..usecases.availability import lookup_availability
from ..usecases.reservations import submit_reservation
from ..utils.audit_log import emit_audit_log
from ..utils.time import is_past

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["reservations"])


def _audit(payload: ReservationCreate, venue: Venue, *, required: bool = True, **kwargs: Any) -> None:
    """Emit an audit line. When not required, a failed write is logged and the request goes on."""
    try:
        emit_audit_log(
            fecha=payload.fecha,
            sector_id=payload.sector_id,
            personas=payload.personas,
            vehiculos=payload.vehiculos,
            grills=payload.grills_reservados,
            monto_total=total_amount(payload.vehiculos, price_per_vehicle=venue.price_per_vehicle),
            metodo_pago=payload.metodo_pago,
            **kwargs,
        )
    except RuntimeError as exc:
        if not required:
            logger.exception("audit log failed for %s", kwargs.get("action"))
            return
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="audit log failed") from exc


@router.post("/reservas", response_model=SubmissionRead, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    payload: ReservationCreate,
    venue: Venue = Depends(get_venue),
    settings: Settings = Depends(get_settings),
    availability_gateway: AvailabilityGateway = Depends(get_availability_gateway),
    reservation_gateway: ReservationGateway = Depends(get_reservation_gateway),
) -> SubmissionRead:
    if venue.find_sector(payload.sector_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="sector not found")
    if is_past(payload.fecha, venue.timezone):
        raise HTTPException(status_code=422, detail="fecha must not be in the past")

    snapshot = await lookup_availability(
        availability_gateway,
        venue,
        day=payload.fecha,
        sector_id=payload.sector_id,
        policy=settings.availability_fallback,
    )
    if snapshot.is_fallback:
        _audit(
            payload,
            venue,
            required=False,
            action="availability.fallback",
            extra={"policy": settings.availability_fallback.value},
        )

    try:
        request = validate_reservation(payload.to_draft(), snapshot, venue=venue)
    except ReservationRejectedError as exc:
        _audit(payload, venue, action="reserva.rejected", message=str(exc))
        raise HTTPException(status_code=422, detail=str(exc))

    try:
        outcome = await submit_reservation(reservation_gateway, request)
    except SubmissionFailedError as exc:
        _audit(payload, venue, action="reserva.failed", message=str(exc))
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))

    _audit(
        payload,
        venue,
        required=False,
        action="reserva.submitted",
        extra={"payment_link": outcome.requires_redirect},
    )
    return SubmissionRead.from_outcome(outcome)
