from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..config import AppSettings, get_settings
from ..core import Clock, SystemClock
from ..data import EventRepository, JsonSlotStore, SlotStore
from .proposals import ProposalService


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root for services to share settings, clock, storage and the ledger."""

    settings: AppSettings = field(default_factory=get_settings)
    clock: Clock = field(default_factory=SystemClock)
    store: Optional[SlotStore] = None
    proposals: Optional[ProposalService] = None
    events: EventRepository = field(init=False)

    def __post_init__(self) -> None:
        storage = self.settings.storage
        if self.store is None:
            self.store = JsonSlotStore(
                storage.data_dir,
                write_retries=storage.write_retries,
                backoff_seconds=storage.write_backoff_seconds,
            )
        self.events = EventRepository(
            self.store,
            slot=storage.events_slot,
            clash_scope=self.settings.ledger.clash_scope,
        )
        if self.proposals is None:
            self.proposals = ProposalService(self.settings.llm)
