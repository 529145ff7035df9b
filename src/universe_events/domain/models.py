from __future__ import annotations

import re
from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime, time
from typing import Any, Dict, List, Mapping

from .errors import ValidationError

_TIME_PATTERN = re.compile(r"^(?:[01]\d|2[0-3]):[0-5]\d$")

# Persisted record key -> attribute name.
RECORD_FIELDS: Dict[str, str] = {
    "id": "id",
    "name": "name",
    "description": "description",
    "date": "date",
    "startTime": "start_time",
    "endTime": "end_time",
    "location": "location",
    "capacity": "capacity",
    "registeredParticipants": "registered_participants",
    "organizer": "organizer",
}

SCHEDULE_FIELDS = frozenset({"date", "start_time", "end_time"})


def parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError as exc:
            raise ValidationError(f"Invalid date {value!r}; expected YYYY-MM-DD.") from exc
    raise ValidationError(f"Unsupported date value: {value!r}")


def parse_clock_time(value: Any) -> time:
    if not isinstance(value, str) or not _TIME_PATTERN.match(value):
        raise ValidationError(f"Invalid time {value!r}; expected zero-padded HH:MM.")
    return time.fromisoformat(value)


def _require_text(label: str, value: Any) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} is required.")


def _require_count(label: str, value: Any, *, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ValidationError(f"{label} must be an integer of at least {minimum}.")


def _check_common(item: "NewEvent | Event") -> None:
    _require_text("Event name", item.name)
    _require_text("Location", item.location)
    _require_text("Organizer name", item.organizer)
    if not isinstance(item.description, str):
        raise ValidationError("Description must be text.")
    if not isinstance(item.date, date) or isinstance(item.date, datetime):
        raise ValidationError(f"Unsupported date value: {item.date!r}")
    parse_clock_time(item.start_time)
    parse_clock_time(item.end_time)
    _require_count("Capacity", item.capacity, minimum=1)


@dataclass(frozen=True, slots=True)
class NewEvent:
    """Candidate event submitted for creation."""

    name: str
    description: str
    date: date
    start_time: str
    end_time: str
    location: str
    capacity: int
    organizer: str

    def __post_init__(self) -> None:
        _check_common(self)

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.date, parse_clock_time(self.start_time))

    @property
    def ends_at(self) -> datetime:
        return datetime.combine(self.date, parse_clock_time(self.end_time))

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "NewEvent":
        try:
            return cls(
                name=record["name"],
                description=record.get("description") or "",
                date=parse_date(record["date"]),
                start_time=record["startTime"],
                end_time=record["endTime"],
                location=record["location"],
                capacity=record["capacity"],
                organizer=record["organizer"],
            )
        except KeyError as exc:
            raise ValidationError(f"Missing event field: {exc.args[0]}") from exc

    def with_description(self, description: str) -> "NewEvent":
        return replace(self, description=description)


@dataclass(frozen=True, slots=True)
class Event:
    """A scheduled event as stored in the ledger."""

    id: str
    name: str
    description: str
    date: date
    start_time: str
    end_time: str
    location: str
    capacity: int
    registered_participants: int
    organizer: str

    def __post_init__(self) -> None:
        _require_text("Event id", self.id)
        _check_common(self)
        _require_count("Registered participants", self.registered_participants, minimum=0)
        # Zero-padded HH:MM strings order like the times they name.
        if self.start_time >= self.end_time:
            raise ValidationError("Event end time must be after start time.")
        if self.registered_participants > self.capacity:
            raise ValidationError(
                f"Registered participants ({self.registered_participants}) exceed capacity ({self.capacity})."
            )

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.date, parse_clock_time(self.start_time))

    @property
    def ends_at(self) -> datetime:
        return datetime.combine(self.date, parse_clock_time(self.end_time))

    @property
    def remaining_capacity(self) -> int:
        return self.capacity - self.registered_participants

    @property
    def is_full(self) -> bool:
        return self.registered_participants >= self.capacity

    @classmethod
    def create(cls, event_id: str, candidate: NewEvent) -> "Event":
        return cls(
            id=event_id,
            name=candidate.name,
            description=candidate.description,
            date=candidate.date,
            start_time=candidate.start_time,
            end_time=candidate.end_time,
            location=candidate.location,
            capacity=candidate.capacity,
            registered_participants=0,
            organizer=candidate.organizer,
        )

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Event":
        try:
            return cls(
                id=str(record["id"]),
                name=record["name"],
                description=record.get("description") or "",
                date=parse_date(record["date"]),
                start_time=record["startTime"],
                end_time=record["endTime"],
                location=record["location"],
                capacity=record["capacity"],
                registered_participants=record.get("registeredParticipants", 0),
                organizer=record["organizer"],
            )
        except KeyError as exc:
            raise ValidationError(f"Missing event field: {exc.args[0]}") from exc

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "date": self.date.isoformat(),
            "startTime": self.start_time,
            "endTime": self.end_time,
            "location": self.location,
            "capacity": self.capacity,
            "registeredParticipants": self.registered_participants,
            "organizer": self.organizer,
        }

    def merge(self, updates: Mapping[str, Any]) -> "Event":
        """Return a copy with ``updates`` applied.

        Keys may be persisted record names (``startTime``) or attribute names
        (``start_time``). The id is immutable.
        """

        attribute_names = {item.name for item in fields(self)}
        changes: Dict[str, Any] = {}
        for key, value in updates.items():
            attribute = RECORD_FIELDS.get(key, key)
            if attribute not in attribute_names:
                raise ValidationError(f"Unknown event field: {key}")
            if attribute == "id":
                if value != self.id:
                    raise ValidationError("Event id cannot be changed.")
                continue
            changes[attribute] = parse_date(value) if attribute == "date" else value
        return replace(self, **changes)

    def changed_fields(self, other: "Event") -> frozenset[str]:
        return frozenset(
            item.name for item in fields(self) if getattr(self, item.name) != getattr(other, item.name)
        )


@dataclass(slots=True)
class CalendarDay:
    date: date
    is_current_month: bool
    is_today: bool
    events: List[Event] = field(default_factory=list)


__all__ = [
    "CalendarDay",
    "Event",
    "NewEvent",
    "RECORD_FIELDS",
    "SCHEDULE_FIELDS",
    "parse_clock_time",
    "parse_date",
]
