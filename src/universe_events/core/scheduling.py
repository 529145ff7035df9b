from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from ..config import ClashScope
from ..domain import ClashError, Event, NewEvent, ValidationError


def time_span(item: NewEvent | Event) -> Tuple[datetime, datetime]:
    return item.starts_at, item.ends_at


def overlaps(first: Tuple[datetime, datetime], second: Tuple[datetime, datetime]) -> bool:
    """Half-open interval test: touching spans do not overlap."""

    return first[0] < second[1] and second[0] < first[1]


def check_span(candidate: NewEvent | Event) -> Tuple[datetime, datetime]:
    start, end = time_span(candidate)
    if start >= end:
        raise ValidationError("Event end time must be after start time.")
    return start, end


def _in_scope(candidate: NewEvent | Event, existing: Event, scope: ClashScope) -> bool:
    if scope is ClashScope.LOCATION:
        return candidate.location.strip().casefold() == existing.location.strip().casefold()
    return True


def find_conflicts(
    candidate: NewEvent | Event,
    existing: Iterable[Event],
    *,
    scope: ClashScope = ClashScope.GLOBAL,
    ignore_id: Optional[str] = None,
) -> List[Event]:
    """Return every stored event whose span overlaps the candidate, in storage order."""

    span = check_span(candidate)
    conflicts: list[Event] = []
    for event in existing:
        if event.id == ignore_id or not _in_scope(candidate, event, scope):
            continue
        if overlaps(span, time_span(event)):
            conflicts.append(event)
    return conflicts


def validate(
    candidate: NewEvent | Event,
    existing: Iterable[Event],
    *,
    scope: ClashScope = ClashScope.GLOBAL,
    ignore_id: Optional[str] = None,
) -> None:
    """Raise ``ValidationError`` or ``ClashError`` unless the candidate fits.

    The span check runs before any comparison. Only the first conflict in
    storage order is reported.
    """

    span = check_span(candidate)
    for event in existing:
        if event.id == ignore_id or not _in_scope(candidate, event, scope):
            continue
        if overlaps(span, time_span(event)):
            raise ClashError(event)


__all__ = ["check_span", "find_conflicts", "overlaps", "time_span", "validate"]
