"""Pure ledger logic: clock, scheduling rules, capacity guard and month grid."""

from . import calendar_grid, capacity, scheduling
from .clock import Clock, FixedClock, SystemClock

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "calendar_grid",
    "capacity",
    "scheduling",
]
