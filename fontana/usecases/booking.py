"""In-memory booking flow for a single visitor."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..config import Venue
from ..domain.errors import (
    AvailabilityUnknownError,
    DateInPastError,
    PersonsExceededError,
    PoliciesNotAcceptedError,
    SubmissionInProgressError,
)
from ..domain.gateways import AvailabilityGateway, ReservationGateway
from ..domain.services import Quote, build_quote, max_persons_allowed, validate_reservation
from ..models import (
    AvailabilityFallback,
    AvailabilitySnapshot,
    PaymentMethod,
    ReservationDraft,
    SubmissionOutcome,
)
from ..utils.time import is_past
from .availability import lookup_availability
from .reservations import submit_reservation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LookupToken:
    generation: int
    day: Optional[date]
    sector_id: Optional[str]


class BookingSession:
    def __init__(
        self,
        venue: Venue,
        availability_gateway: AvailabilityGateway,
        reservation_gateway: ReservationGateway,
        *,
        fallback: AvailabilityFallback = AvailabilityFallback.OPTIMISTIC,
    ) -> None:
        self.venue = venue
        self.availability_gateway = availability_gateway
        self.reservation_gateway = reservation_gateway
        self.fallback = fallback

        self.date: Optional[date] = None
        self.sector_id: Optional[str] = None
        self.persons = 1
        self.vehicles = 1
        self.grills = 1
        self.name = ""
        self.phone = ""
        self.email: Optional[str] = None
        self.payment_method = PaymentMethod.EFECTIVO_TRANSFERENCIA
        self.accepted_policies = False

        self.availability: Optional[AvailabilitySnapshot] = None
        self.submitting = False
        self._token = LookupToken(generation=0, day=None, sector_id=None)

    @property
    def quote(self) -> Quote:
        return build_quote(
            self.venue,
            vehicles=self.vehicles,
            persons=self.persons,
            availability=self.availability,
        )

    async def select_date(self, day: date) -> Optional[AvailabilitySnapshot]:
        if is_past(day, self.venue.timezone):
            raise DateInPastError(f"{day.isoformat()} is before today")
        self.date = day
        return await self._refresh_availability()

    async def select_sector(self, sector_id: str) -> Optional[AvailabilitySnapshot]:
        self.sector_id = sector_id
        return await self._refresh_availability()

    def _is_current(self, token: LookupToken) -> bool:
        return token == self._token

    async def _refresh_availability(self) -> Optional[AvailabilitySnapshot]:
        """
        Invalidate the snapshot and look it up again for the current key.

        Each call takes a new token; a lookup only lands if its token is still
        the current one when it resolves. Returns None when there is nothing
        to look up or when a newer selection superseded this one.
        """
        token = LookupToken(
            generation=self._token.generation + 1,
            day=self.date,
            sector_id=self.sector_id,
        )
        self._token = token
        self.availability = None
        if token.day is None or token.sector_id is None:
            return None

        snapshot = await lookup_availability(
            self.availability_gateway,
            self.venue,
            day=token.day,
            sector_id=token.sector_id,
            policy=self.fallback,
        )
        if not self._is_current(token):
            logger.debug("dropping stale availability for %s/%s", token.day, token.sector_id)
            return None
        self.availability = snapshot
        return snapshot

    def _draft(self, day: date, sector_id: str) -> ReservationDraft:
        return ReservationDraft(
            date=day,
            sector_id=sector_id,
            persons=self.persons,
            vehicles=self.vehicles,
            grills=self.grills,
            name=self.name,
            phone=self.phone,
            email=self.email,
            payment_method=self.payment_method,
        )

    async def submit(self) -> SubmissionOutcome:
        if self.submitting:
            raise SubmissionInProgressError("a submission is already pending")
        if not self.accepted_policies:
            raise PoliciesNotAcceptedError("cancellation policy must be accepted")

        if self.date is None or self.sector_id is None:
            max_persons = max_persons_allowed(self.vehicles, persons_per_vehicle=self.venue.persons_per_vehicle)
            if self.persons > max_persons:
                raise PersonsExceededError(max_persons)
            raise AvailabilityUnknownError()
        request = validate_reservation(self._draft(self.date, self.sector_id), self.availability, venue=self.venue)

        self.submitting = True
        try:
            return await submit_reservation(self.reservation_gateway, request)
        finally:
            self.submitting = False
