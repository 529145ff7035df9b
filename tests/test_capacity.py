"""Tests for the capacity guard."""

from dataclasses import replace

import pytest

from universe_events.core import capacity
from universe_events.domain import CapacityError, Event, NotFoundError


def test_increments_a_copy(make_event):
    event = Event.create("e1", make_event(capacity=2))
    index, updated = capacity.register("e1", [event])
    assert index == 0
    assert updated.registered_participants == 1
    assert event.registered_participants == 0


def test_unknown_id(make_event):
    with pytest.raises(NotFoundError) as info:
        capacity.register("missing", [Event.create("e1", make_event())])
    assert info.value.event_id == "missing"


def test_full_event_is_rejected(make_event):
    full = replace(Event.create("e1", make_event(capacity=2)), registered_participants=2)
    with pytest.raises(CapacityError) as info:
        capacity.register("e1", [full])
    assert info.value.event.registered_participants == 2


def test_finds_event_by_position(make_event):
    events = [
        Event.create("a", make_event(start_time="08:00", end_time="09:00")),
        Event.create("b", make_event(start_time="09:00", end_time="10:00")),
    ]
    index, updated = capacity.register("b", events)
    assert index == 1
    assert updated.id == "b"
