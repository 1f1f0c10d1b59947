"""Time sources. All lifecycle transitions poll now() on each tick."""

from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        """Current time, timezone-aware."""
        ...


class SystemClock:
    """Wall clock in the local timezone."""

    def now(self) -> datetime:
        return datetime.now().astimezone()


class ManualClock:
    """Controllable clock for tests and scripted runs."""

    def __init__(self, start: datetime) -> None:
        if start.tzinfo is None:
            raise ValueError("ManualClock requires a timezone-aware datetime")
        self._now = start

    def now(self) -> datetime:
        return self._now

    def set(self, value: datetime) -> None:
        if value.tzinfo is None:
            raise ValueError("ManualClock requires a timezone-aware datetime")
        self._now = value

    def advance(self, **kwargs: float) -> datetime:
        """Move forward by timedelta(**kwargs); returns the new time."""
        self._now = self._now + timedelta(**kwargs)
        return self._now


def is_same_local_day(value: datetime, now: datetime) -> bool:
    """True if value falls on now's calendar date, in now's timezone."""
    return value.astimezone(now.tzinfo).date() == now.date()


def next_local_midnight(now: datetime) -> datetime:
    return datetime.combine(now.date() + timedelta(days=1), time.min, tzinfo=now.tzinfo)
