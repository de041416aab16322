from dataclasses import dataclass
from typing import Optional

from ..config import Venue
from ..models import AvailabilitySnapshot, ReservationDraft, ReservationRequest
from .errors import (
    AvailabilityUnknownError,
    GrillsBelowMinimumError,
    GrillsExceedRemainingError,
    GrillsExceedVehiclesError,
    NoCapacityError,
    PersonsExceededError,
)


def max_grills_by_vehicles(vehicles: int) -> int:
    return 2 if vehicles >= 2 else 1


def max_persons_allowed(vehicles: int, *, persons_per_vehicle: int = 5) -> int:
    return max(1, vehicles) * persons_per_vehicle


def max_grills_by_availability(vehicles: int, availability: Optional[AvailabilitySnapshot]) -> int:
    by_vehicles = max_grills_by_vehicles(vehicles)
    if availability is None:
        return by_vehicles
    return min(by_vehicles, availability.remaining)


def total_amount(vehicles: int, *, price_per_vehicle: int = 12000) -> int:
    return max(0, vehicles) * price_per_vehicle


def persons_hint(persons: int, vehicles: int, *, persons_per_vehicle: int = 5) -> str:
    limit = max_persons_allowed(vehicles, persons_per_vehicle=persons_per_vehicle)
    if persons > limit:
        return f"Supera el máximo de {limit} personas para {vehicles} vehículo(s)."
    return ""


@dataclass(frozen=True)
class Quote:
    vehicles: int
    persons: int
    total: int
    max_persons: int
    max_grills_by_vehicles: int
    max_grills_available: int
    persons_hint: str


def build_quote(
    venue: Venue,
    *,
    vehicles: int,
    persons: int,
    availability: Optional[AvailabilitySnapshot] = None,
) -> Quote:
    return Quote(
        vehicles=vehicles,
        persons=persons,
        total=total_amount(vehicles, price_per_vehicle=venue.price_per_vehicle),
        max_persons=max_persons_allowed(vehicles, persons_per_vehicle=venue.persons_per_vehicle),
        max_grills_by_vehicles=max_grills_by_vehicles(vehicles),
        max_grills_available=max_grills_by_availability(vehicles, availability),
        persons_hint=persons_hint(persons, vehicles, persons_per_vehicle=venue.persons_per_vehicle),
    )


def validate_reservation(
    draft: ReservationDraft,
    availability: Optional[AvailabilitySnapshot],
    *,
    venue: Venue,
) -> ReservationRequest:
    """
    Pure validation of a form submission against a capacity snapshot.
    Checks run in a fixed order and stop at the first failure.
    Returns the request ready to be posted. Raises ReservationRejectedError otherwise.
    """
    max_persons = max_persons_allowed(draft.vehicles, persons_per_vehicle=venue.persons_per_vehicle)
    if draft.persons > max_persons:
        raise PersonsExceededError(max_persons)
    if availability is None:
        raise AvailabilityUnknownError()
    if availability.remaining <= 0:
        raise NoCapacityError()
    if draft.grills < 1:
        raise GrillsBelowMinimumError()
    allowed = max_grills_by_vehicles(draft.vehicles)
    if draft.grills > allowed:
        raise GrillsExceedVehiclesError(draft.vehicles, allowed)
    if draft.grills > availability.remaining:
        raise GrillsExceedRemainingError(availability.remaining)

    return ReservationRequest(
        date=draft.date,
        sector_id=draft.sector_id,
        persons=draft.persons,
        vehicles=draft.vehicles,
        grills=draft.grills,
        name=draft.name,
        phone=draft.phone,
        email=draft.email,
        payment_method=draft.payment_method,
        total_amount=total_amount(draft.vehicles, price_per_vehicle=venue.price_per_vehicle),
        cancellation_policy=venue.cancellation_policy,
    )
