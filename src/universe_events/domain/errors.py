from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Event


class LedgerError(Exception):
    """Base class for every outcome the event ledger reports to callers."""


class ValidationError(LedgerError):
    """Raised when an event's fields or time span are malformed."""


class ClashError(LedgerError):
    """Raised when a candidate's time span overlaps an existing event."""

    def __init__(self, conflict: "Event") -> None:
        self.conflict = conflict
        super().__init__(f'Clash detected: Event "{conflict.name}" overlaps with the proposed time.')


class NotFoundError(LedgerError):
    """Raised when an event id is not in the ledger."""

    def __init__(self, event_id: str) -> None:
        self.event_id = event_id
        super().__init__(f"Event {event_id} not found.")


class CapacityError(LedgerError):
    """Raised when registering for an event that has no seats left."""

    def __init__(self, event: "Event") -> None:
        self.event = event
        super().__init__(f'Event "{event.name}" is full.')


class PersistenceError(LedgerError):
    """Raised when durable storage cannot be read or written."""


__all__ = [
    "CapacityError",
    "ClashError",
    "LedgerError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
]
