from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Mapping, Optional

from ..core import calendar_grid
from ..data import EventRepository
from ..domain import CalendarDay, Event, NewEvent
from .context import ServiceContext
from .proposals import ProposalResult, ProposalService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CalendarService:
    context: ServiceContext

    @property
    def events(self) -> EventRepository:
        return self.context.events

    @property
    def proposals(self) -> ProposalService:
        assert self.context.proposals is not None
        return self.context.proposals

    def fetch_events(self) -> List[Event]:
        return self.events.list()

    def get_event(self, event_id: str) -> Event:
        return self.events.get(event_id)

    def draft_proposal(self, candidate: NewEvent) -> ProposalResult:
        return self.proposals.draft(
            name=candidate.name,
            date=candidate.date.isoformat(),
            start_time=candidate.start_time,
            end_time=candidate.end_time,
            location=candidate.location,
            organizer=candidate.organizer,
            description=candidate.description,
        )

    def create_event(self, candidate: NewEvent, *, enrich_description: bool = False) -> Event:
        """Create an event, optionally replacing its description with a generated proposal.

        A failed proposal keeps the submitted description.
        """

        if enrich_description:
            result = self.draft_proposal(candidate)
            if result.confirmed:
                candidate = candidate.with_description(result.markdown)
            else:
                logger.info("Creating %s with its submitted description", candidate.name)
        return self.events.create(candidate)

    def register_for_event(self, event_id: str) -> Event:
        return self.events.register(event_id)

    def update_event(self, event_id: str, updates: Mapping[str, Any]) -> Event:
        return self.events.update(event_id, updates)

    def month(self, year: Optional[int] = None, month: Optional[int] = None) -> List[CalendarDay]:
        today = self.context.clock.today()
        return calendar_grid.build(
            year if year is not None else today.year,
            month if month is not None else today.month,
            self.events.list(),
            today,
        )

    def selected_day(self, grid: List[CalendarDay]) -> CalendarDay:
        return calendar_grid.default_selection(grid, self.context.clock.today())

    def events_for_day(self, target_day: date) -> List[Event]:
        return sorted(
            (event for event in self.events.list() if event.date == target_day),
            key=lambda event: event.start_time,
        )
