"""Clock abstraction for "today" and "now" comparisons.

SystemClock: local wall-clock time
FixedClock: settable time for tests and deterministic rendering

Calendar code never calls ``date.today()`` directly; it asks a clock.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional, Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        """Current local wall-clock instant (naive)."""
        ...

    def today(self) -> date:
        """Current local calendar date."""
        ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now()

    def today(self) -> date:
        return self.now().date()


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, instant: Optional[datetime | date] = None) -> None:
        self._instant = self._coerce(instant or datetime(2024, 1, 1, 9, 0))

    @staticmethod
    def _coerce(value: datetime | date) -> datetime:
        if isinstance(value, datetime):
            return value
        return datetime.combine(value, time(9, 0))

    def now(self) -> datetime:
        return self._instant

    def today(self) -> date:
        return self._instant.date()

    def set(self, instant: datetime | date) -> None:
        self._instant = self._coerce(instant)

    def advance(self, **delta: float) -> None:
        self._instant += timedelta(**delta)


__all__ = ["Clock", "FixedClock", "SystemClock"]
