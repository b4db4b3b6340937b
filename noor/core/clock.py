"""Injectable time sources.

Streak rules compare calendar days, so every component that needs "now"
takes a Clock instead of reading the wall clock directly.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo
from typing import Optional, Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        """Return the current moment as a timezone-aware datetime."""
        ...


class SystemClock:
    """Wall clock in a fixed timezone, or the device-local one when tz is None."""

    def __init__(self, tz: Optional[tzinfo] = None):
        self._tz = tz

    def now(self) -> datetime:
        if self._tz is None:
            return datetime.now().astimezone()
        return datetime.now(self._tz)


class FixedClock:
    """Manually driven clock for tests and replays."""

    def __init__(self, moment: datetime):
        if moment.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware datetime")
        self._moment = moment

    def now(self) -> datetime:
        return self._moment

    def set(self, moment: datetime) -> None:
        if moment.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware datetime")
        self._moment = moment

    def advance(self, days: int = 0, **kwargs) -> datetime:
        self._moment = self._moment + timedelta(days=days, **kwargs)
        return self._moment


def calendar_day(moment: datetime, reference: datetime) -> date:
    """Calendar day of `moment` in the timezone of `reference`.

    Naive datetimes are taken to already be in local time.
    """
    if moment.tzinfo is None or reference.tzinfo is None:
        return moment.date()
    return moment.astimezone(reference.tzinfo).date()
