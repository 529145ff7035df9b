from __future__ import annotations

from typing import Any, Dict, Optional

from ..core import calendar_grid
from ..domain import NewEvent, ValidationError
from ..domain.models import parse_date
from .registry import register_api
from .serializers import serialize_day, serialize_event
from .state import api_state


@register_api(
    "fetch_events",
    description="Return every event in the ledger in storage order.",
    category="events",
    tags=("read",),
)
def fetch_events() -> Dict[str, Any]:
    return {"events": [serialize_event(event) for event in api_state.calendar.fetch_events()]}


@register_api(
    "get_event_details",
    description="Return a single event by its identifier.",
    category="events",
    tags=("read",),
)
def get_event_details(event_id: str) -> Dict[str, Any]:
    return {"event": serialize_event(api_state.calendar.get_event(event_id))}


@register_api(
    "create_event",
    description="Create an event after checking its time span and clashes with existing events.",
    category="events",
    tags=("write",),
)
def create_event(
    *,
    name: str,
    date: str,
    start_time: str,
    end_time: str,
    location: str,
    capacity: int,
    organizer: str,
    description: str = "",
    enrich_description: bool = False,
) -> Dict[str, Any]:
    candidate = NewEvent(
        name=name,
        description=description,
        date=parse_date(date),
        start_time=start_time,
        end_time=end_time,
        location=location,
        capacity=capacity,
        organizer=organizer,
    )
    event = api_state.calendar.create_event(candidate, enrich_description=enrich_description)
    return {"event": serialize_event(event)}


@register_api(
    "register_for_event",
    description="Register one participant for an event if it still has capacity.",
    category="events",
    tags=("write", "registration"),
)
def register_for_event(event_id: str) -> Dict[str, Any]:
    event = api_state.calendar.register_for_event(event_id)
    return {"event": serialize_event(event)}


@register_api(
    "update_event",
    description="Apply a partial update to an event; schedule changes are re-checked for clashes.",
    category="events",
    tags=("write",),
)
def update_event(event_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
    event = api_state.calendar.update_event(event_id, updates)
    return {"event": serialize_event(event)}


@register_api(
    "calendar_month",
    description="Return the 42-cell Monday-first grid for a month (defaults to the current month).",
    category="calendar",
    tags=("read", "grid"),
)
def calendar_month(year: Optional[int] = None, month: Optional[int] = None) -> Dict[str, Any]:
    for label, value in (("year", year), ("month", month)):
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            raise ValidationError(f"{label} must be an integer, got {value!r}.")
    grid = api_state.calendar.month(year, month)
    selected = api_state.calendar.selected_day(grid)
    shown_year, shown_month = calendar_grid.month_of(next(cell.date for cell in grid if cell.is_current_month))
    return {
        "year": shown_year,
        "month": shown_month,
        "selected": selected.date.isoformat(),
        "days": [serialize_day(day) for day in grid],
    }


@register_api(
    "events_for_day",
    description="Return the events on a day ordered by start time.",
    category="calendar",
    tags=("read",),
)
def events_for_day(day: str) -> Dict[str, Any]:
    target = parse_date(day)
    events = api_state.calendar.events_for_day(target)
    return {"day": target.isoformat(), "events": [serialize_event(event) for event in events]}


@register_api(
    "generate_event_proposal",
    description="Draft a markdown event proposal from partial event details.",
    category="proposals",
    tags=("llm",),
)
def generate_event_proposal(
    name: Optional[str] = None,
    date: Optional[str] = None,
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
    location: Optional[str] = None,
    organizer: Optional[str] = None,
    description: Optional[str] = None,
) -> Dict[str, Any]:
    result = api_state.calendar.proposals.draft(
        name=name,
        date=date,
        start_time=start_time,
        end_time=end_time,
        location=location,
        organizer=organizer,
        description=description,
    )
    return {"proposal": result.to_dict()}
