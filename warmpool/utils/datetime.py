"""Datetime helpers.

All timestamps handled by the warm pool are timezone-aware UTC.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def truncate_hour(value: datetime) -> datetime:
    """Round a datetime down to the start of its UTC hour."""
    return ensure_utc(value).replace(minute=0, second=0, microsecond=0)


class Clock(Protocol):
    """Source of the current instant."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return utcnow()
