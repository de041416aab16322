from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Protocol

from ..models import SubmissionReceipt


class AvailabilityGateway(Protocol):
    async def fetch(self, day: date, sector_id: str) -> Mapping[str, Any]: ...


class ReservationGateway(Protocol):
    async def submit(self, payload: Mapping[str, Any]) -> SubmissionReceipt: ...
