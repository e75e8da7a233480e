"""Timestamp helpers shared by the time-windowed label metrics."""

from __future__ import annotations

from datetime import datetime

import pytz

SECONDS_PER_DAY = 86400.0


def to_utc(value: datetime | None) -> datetime | None:
    """Return ``value`` as an aware UTC datetime (naive values are taken as UTC)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return pytz.UTC.localize(value)
    return value.astimezone(pytz.UTC)


def days_between(later: datetime, earlier: datetime) -> float:
    return (to_utc(later) - to_utc(earlier)).total_seconds() / SECONDS_PER_DAY
