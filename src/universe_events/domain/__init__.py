"""Domain models for the event ledger."""

from __future__ import annotations

from .errors import (
    CapacityError,
    ClashError,
    LedgerError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from .models import CalendarDay, Event, NewEvent

__all__ = [
    "CalendarDay",
    "CapacityError",
    "ClashError",
    "Event",
    "LedgerError",
    "NewEvent",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
]
