"""Shared fixtures for the UniVerse ledger test suite."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Optional

import pytest

from universe_events.config import AppSettings, load_settings
from universe_events.core import FixedClock
from universe_events.data import EventRepository, JsonSlotStore
from universe_events.domain import NewEvent, PersistenceError
from universe_events.services import ServiceContext


class MemorySlotStore:
    """In-memory slot store that can be told to fail writes."""

    def __init__(self) -> None:
        self.slots: dict[str, Any] = {}
        self.fail_writes = False
        self.writes = 0

    def read(self, slot: str) -> Optional[Any]:
        return self.slots.get(slot)

    def write(self, slot: str, payload: Any) -> None:
        if self.fail_writes:
            raise PersistenceError("disk unavailable")
        self.writes += 1
        self.slots[slot] = payload


# ---------------------------------------------------------------------------
# Settings & clock
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path, monkeypatch) -> AppSettings:
    monkeypatch.setenv("UNIVERSE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("UNIVERSE_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("UNIVERSE_WRITE_BACKOFF_SECONDS", "0")
    monkeypatch.delenv("UNIVERSE_CLASH_SCOPE", raising=False)
    monkeypatch.delenv("UNIVERSE_EVENTS_SLOT", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    return load_settings()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 5, 14, 9, 30))


# ---------------------------------------------------------------------------
# Storage & ledger
# ---------------------------------------------------------------------------

@pytest.fixture
def store(tmp_path) -> JsonSlotStore:
    return JsonSlotStore(tmp_path / "slots", backoff_seconds=0)


@pytest.fixture
def memory_store() -> MemorySlotStore:
    return MemorySlotStore()


@pytest.fixture
def repository(store) -> EventRepository:
    return EventRepository(store)


@pytest.fixture
def make_event() -> Callable[..., NewEvent]:
    """Factory for valid candidates; override any field by keyword."""

    def _make(**overrides: Any) -> NewEvent:
        fields: dict[str, Any] = {
            "name": "Robotics Meetup",
            "description": "Build and race line followers.",
            "date": date(2024, 5, 14),
            "start_time": "10:00",
            "end_time": "11:00",
            "location": "Hall A",
            "capacity": 10,
            "organizer": "Robotics Club",
        }
        fields.update(overrides)
        return NewEvent(**fields)

    return _make


@pytest.fixture
def context(settings, clock, store) -> ServiceContext:
    return ServiceContext(settings=settings, clock=clock, store=store)
