from datetime import date, datetime, timezone

from fontana.utils.time import is_past, venue_today

TZ = "America/Argentina/Cordoba"


def test_venue_today_uses_venue_timezone() -> None:
    # 01:30 UTC is still the previous evening in Córdoba (UTC-3)
    now = datetime(2025, 6, 2, 1, 30, tzinfo=timezone.utc)
    assert venue_today(TZ, now=now) == date(2025, 6, 1)


def test_today_is_not_past() -> None:
    now = datetime(2025, 6, 1, 15, 0, tzinfo=timezone.utc)
    assert is_past(date(2025, 6, 1), TZ, now=now) is False
    assert is_past(date(2025, 5, 31), TZ, now=now) is True
