from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from datetime import date, datetime, timedelta

from services.api.app.services.catalog_base import TimeSlot, UnavailablePeriod

RUSH_WINDOW_DAYS = 14
INTERVAL_MINUTES = 15

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})\s*(AM|PM)$")


def parse_date(value: str) -> date | None:
    try:
        return date.fromisoformat((value or "").strip())
    except ValueError:
        return None


def format_display_date(value: str, *, abbreviated: bool = False) -> str:
    """``2025-01-15`` as ``January 15, 2025`` or ``Jan 15, 2025``; bad input is returned as is."""
    picked = parse_date(value)
    if picked is None:
        return value
    month = picked.strftime("%b" if abbreviated else "%B")
    return f"{month} {picked.day}, {picked.year}"


def is_rush_order(pickup_date: str, today: date | None = None) -> bool:
    """Pickups less than two weeks out are rush orders."""
    picked = parse_date(pickup_date)
    if picked is None:
        return False
    today = today or date.today()
    return today <= picked < today + timedelta(days=RUSH_WINDOW_DAYS)


def find_unavailable_period(
    pickup_date: str, periods: Sequence[UnavailablePeriod]
) -> UnavailablePeriod | None:
    picked = parse_date(pickup_date)
    if picked is None:
        return None

    for period in periods:
        start = parse_date(period.start_date)
        if start is None:
            continue
        end = parse_date(period.end_date or "") or start
        if start <= picked <= end:
            return period
    return None


def slots_for_date(pickup_date: str, time_slots: Mapping[str, list[TimeSlot]]) -> list[TimeSlot]:
    picked = parse_date(pickup_date)
    if picked is None:
        return []
    return list(time_slots.get(picked.strftime("%A"), []))


def _parse_clock(value: str) -> datetime:
    match = _TIME_RE.match(value.strip().upper())
    if not match:
        raise ValueError(f"Invalid time format: {value}")

    hour, minute, period = int(match.group(1)), int(match.group(2)), match.group(3)
    if not 1 <= hour <= 12 or not 0 <= minute <= 59:
        raise ValueError(f"Invalid time format: {value}")

    if period == "PM" and hour != 12:
        hour += 12
    elif period == "AM" and hour == 12:
        hour = 0
    return datetime(2000, 1, 1, hour, minute)


def _format_clock(value: datetime) -> str:
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


def generate_time_intervals(window: str) -> list[str]:
    """15-minute pickup times within a "8:00 AM - 10:00 AM" window, both ends included."""

    parts = [p.strip() for p in (window or "").split(" - ")]
    if len(parts) != 2 or not all(parts):
        raise ValueError(f"Invalid time window format: {window}")

    start = _parse_clock(parts[0])
    end = _parse_clock(parts[1])
    if end < start:
        end += timedelta(days=1)

    out: list[str] = []
    current = start
    while current <= end:
        out.append(_format_clock(current))
        current += timedelta(minutes=INTERVAL_MINUTES)
    return out
