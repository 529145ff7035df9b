from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from ..domain import CalendarDay, Event


class EventPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str = Field(default="")
    date: str
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    location: str
    capacity: int
    registered_participants: int = Field(alias="registeredParticipants")
    organizer: str
    remaining_capacity: int = Field(alias="remainingCapacity")
    is_full: bool = Field(alias="isFull")

    @classmethod
    def from_domain(cls, event: Event) -> "EventPayload":
        return cls(
            id=event.id,
            name=event.name,
            description=event.description,
            date=event.date.isoformat(),
            start_time=event.start_time,
            end_time=event.end_time,
            location=event.location,
            capacity=event.capacity,
            registered_participants=event.registered_participants,
            organizer=event.organizer,
            remaining_capacity=event.remaining_capacity,
            is_full=event.is_full,
        )


class CalendarDayPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str
    is_current_month: bool = Field(alias="isCurrentMonth")
    is_today: bool = Field(alias="isToday")
    events: List[EventPayload] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, day: CalendarDay) -> "CalendarDayPayload":
        return cls(
            date=day.date.isoformat(),
            is_current_month=day.is_current_month,
            is_today=day.is_today,
            events=[EventPayload.from_domain(event) for event in day.events],
        )
