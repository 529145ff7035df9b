from __future__ import annotations

from typing import Any, Dict

from ..domain import CalendarDay, Event
from .models import CalendarDayPayload, EventPayload


def serialize_event(event: Event) -> Dict[str, Any]:
    return EventPayload.from_domain(event).model_dump(by_alias=True)


def serialize_day(day: CalendarDay) -> Dict[str, Any]:
    return CalendarDayPayload.from_domain(day).model_dump(by_alias=True)
