from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping

import httpx

from ..domain.errors import AvailabilityLookupError, UpstreamRejectedError, UpstreamUnavailableError
from ..domain.gateways import AvailabilityGateway, ReservationGateway
from ..models import SubmissionReceipt
from ..utils.request_id import tracing_headers

logger = logging.getLogger(__name__)

AVAILABILITY_PATH = "/api/availability"
RESERVAS_PATH = "/api/reservas"


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


class HttpxAvailabilityGateway(AvailabilityGateway):
    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    async def fetch(self, day: date, sector_id: str) -> Mapping[str, Any]:
        try:
            response = await self.client.get(
                AVAILABILITY_PATH,
                params={"date": day.isoformat(), "sector": sector_id},
                headers=tracing_headers(),
            )
        except httpx.HTTPError as exc:
            raise AvailabilityLookupError(f"availability request failed: {exc}") from exc
        if not response.is_success:
            raise AvailabilityLookupError(f"availability API answered {response.status_code}")
        try:
            data = response.json()
        except ValueError as exc:
            raise AvailabilityLookupError("availability API returned invalid JSON") from exc
        if not isinstance(data, dict):
            raise AvailabilityLookupError("availability API returned a non-object body")
        return data


class HttpxReservationGateway(ReservationGateway):
    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    async def submit(self, payload: Mapping[str, Any]) -> SubmissionReceipt:
        try:
            response = await self.client.post(RESERVAS_PATH, json=dict(payload), headers=tracing_headers())
        except httpx.HTTPError as exc:
            raise UpstreamUnavailableError(str(exc)) from exc
        if not response.is_success:
            raise UpstreamRejectedError(response.status_code)

        # The body is optional on success.
        try:
            body = response.json()
        except ValueError:
            logger.debug("reservations API returned a non-JSON success body")
            body = {}
        if not isinstance(body, dict):
            body = {}
        return SubmissionReceipt(message=_text(body.get("message")), payment_link=_text(body.get("payment_link")))
