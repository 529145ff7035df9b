from __future__ import annotations

import logging
import threading
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple
from uuid import uuid4

from ...config import ClashScope
from ...config.settings import DEFAULT_EVENTS_SLOT
from ...core import capacity, scheduling
from ...domain import Event, LedgerError, NewEvent, NotFoundError, PersistenceError, ValidationError
from ...domain.models import SCHEDULE_FIELDS
from ..storage import SlotStore

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid4().hex[:12]


class EventRepository:
    """Single source of truth for events, persisted to one storage slot.

    Writes are serialised by a re-entrant lock and follow "read snapshot,
    decide, persist, swap". The committed snapshot is an immutable tuple, so
    readers see either the old or the new state without taking the lock.
    """

    def __init__(
        self,
        store: SlotStore,
        *,
        slot: str = DEFAULT_EVENTS_SLOT,
        clash_scope: ClashScope = ClashScope.GLOBAL,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._store = store
        self._slot = slot
        self._clash_scope = clash_scope
        self._id_factory = id_factory
        self._lock = threading.RLock()
        self._events: Tuple[Event, ...] = self._load()

    @property
    def slot(self) -> str:
        return self._slot

    @property
    def clash_scope(self) -> ClashScope:
        return self._clash_scope

    def _load(self) -> Tuple[Event, ...]:
        try:
            payload = self._store.read(self._slot)
        except PersistenceError as exc:
            logger.warning("Failed to load events from slot %s, starting empty: %s", self._slot, exc)
            return ()
        if payload is None:
            return ()
        if not isinstance(payload, list):
            logger.warning("Slot %s does not hold a JSON array, starting empty.", self._slot)
            return ()
        try:
            events = tuple(Event.from_record(record) for record in payload)
        except (LedgerError, TypeError, AttributeError) as exc:
            logger.warning("Slot %s holds malformed events, starting empty: %s", self._slot, exc)
            return ()
        logger.info("Loaded %s events from slot %s", len(events), self._slot)
        return events

    def _commit(self, events: Sequence[Event]) -> None:
        # Persist first: memory only changes once the slot holds the new state.
        self._store.write(self._slot, [event.to_record() for event in events])
        self._events = tuple(events)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list(self) -> List[Event]:
        return list(self._events)

    def get(self, event_id: str) -> Event:
        for event in self._events:
            if event.id == event_id:
                return event
        raise NotFoundError(event_id)

    def __len__(self) -> int:
        return len(self._events)

    # ------------------------------------------------------------------
    # Writes (lock-protected)
    # ------------------------------------------------------------------

    def _fresh_id(self, snapshot: Sequence[Event]) -> str:
        taken = {event.id for event in snapshot}
        while True:
            candidate = self._id_factory()
            if candidate not in taken:
                return candidate

    def create(self, candidate: NewEvent) -> Event:
        with self._lock:
            snapshot = self._events
            scheduling.validate(candidate, snapshot, scope=self._clash_scope)
            event = Event.create(self._fresh_id(snapshot), candidate)
            self._commit((*snapshot, event))
        logger.info("Created event %s (%s on %s %s-%s)", event.id, event.name, event.date, event.start_time, event.end_time)
        return event

    def register(self, event_id: str) -> Event:
        with self._lock:
            snapshot = self._events
            index, updated = capacity.register(event_id, snapshot)
            self._commit((*snapshot[:index], updated, *snapshot[index + 1 :]))
        logger.info(
            "Registered participant for event %s (%s/%s)",
            event_id,
            updated.registered_participants,
            updated.capacity,
        )
        return updated

    def update(self, event_id: str, updates: Mapping[str, Any]) -> Event:
        """Merge ``updates`` into an event.

        Schedule changes are re-validated against every other event so that an
        update cannot introduce an overlap or an inverted span.
        """

        if not isinstance(updates, Mapping):
            raise ValidationError(f"Updates must be a mapping of field names to values, got {type(updates).__name__}.")
        with self._lock:
            snapshot = self._events
            index = self._index_of(event_id, snapshot)
            current = snapshot[index]
            try:
                updated = current.merge(updates)
            except TypeError as exc:
                raise ValidationError(str(exc)) from exc
            changed = updated.changed_fields(current)
            if not changed:
                return current
            revalidate = bool(changed & SCHEDULE_FIELDS) or (
                "location" in changed and self._clash_scope is ClashScope.LOCATION
            )
            if revalidate:
                scheduling.validate(updated, snapshot, scope=self._clash_scope, ignore_id=event_id)
            self._commit((*snapshot[:index], updated, *snapshot[index + 1 :]))
        logger.info("Updated event %s fields: %s", event_id, ", ".join(sorted(changed)))
        return updated

    @staticmethod
    def _index_of(event_id: str, snapshot: Sequence[Event]) -> int:
        for index, event in enumerate(snapshot):
            if event.id == event_id:
                return index
        raise NotFoundError(event_id)

    def reload(self) -> None:
        with self._lock:
            self._events = self._load()


__all__ = ["EventRepository"]
