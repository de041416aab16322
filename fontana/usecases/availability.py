import logging
import math
from datetime import date
from typing import Any, Mapping

from ..config import Venue
from ..domain.errors import AvailabilityLookupError
from ..domain.gateways import AvailabilityGateway
from ..models import AvailabilityFallback, AvailabilitySnapshot

logger = logging.getLogger(__name__)


def _count(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AvailabilityLookupError(f"{field} is not a number: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    raise AvailabilityLookupError(f"{field} is not a whole number: {value!r}")


def snapshot_from_payload(
    data: Mapping[str, Any],
    *,
    day: date,
    sector_id: str,
    nominal_capacity: int,
) -> AvailabilitySnapshot:
    total = data.get("total")
    reserved = data.get("reserved")
    return AvailabilitySnapshot(
        date=day,
        sector_id=sector_id,
        total=_count(total, "total") if total is not None else nominal_capacity,
        reserved=_count(reserved, "reserved") if reserved is not None else 0,
    )


def fallback_snapshot(
    policy: AvailabilityFallback,
    *,
    day: date,
    sector_id: str,
    nominal_capacity: int,
) -> AvailabilitySnapshot:
    """
    Snapshot used when the availability API cannot answer.

    OPTIMISTIC trusts that the sector is empty, so the visitor can keep going
    and the backend has the final word. This can double-book during a long
    backend outage. STRICT treats the sector as full instead.
    """
    if policy is AvailabilityFallback.STRICT:
        reserved = nominal_capacity
    else:
        reserved = 0
    return AvailabilitySnapshot(
        date=day,
        sector_id=sector_id,
        total=nominal_capacity,
        reserved=reserved,
        is_fallback=True,
    )


async def lookup_availability(
    gateway: AvailabilityGateway,
    venue: Venue,
    *,
    day: date,
    sector_id: str,
    policy: AvailabilityFallback = AvailabilityFallback.OPTIMISTIC,
) -> AvailabilitySnapshot:
    nominal = venue.nominal_capacity(sector_id)
    try:
        data = await gateway.fetch(day, sector_id)
        return snapshot_from_payload(data, day=day, sector_id=sector_id, nominal_capacity=nominal)
    except AvailabilityLookupError as exc:
        logger.warning(
            "availability lookup failed for %s/%s, applying %s fallback: %s",
            day.isoformat(),
            sector_id,
            policy.value,
            exc,
        )
        return fallback_snapshot(policy, day=day, sector_id=sector_id, nominal_capacity=nominal)
