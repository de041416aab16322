from datetime import date, datetime
from zoneinfo import ZoneInfo


def venue_today(tz_name: str, *, now: datetime | None = None) -> date:
    """Calendar date at the venue. Earliest day a reservation can be made for."""
    tz = ZoneInfo(tz_name)
    current = now.astimezone(tz) if now is not None else datetime.now(tz)
    return current.date()


def is_past(day: date, tz_name: str, *, now: datetime | None = None) -> bool:
    return day < venue_today(tz_name, now=now)
