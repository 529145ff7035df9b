"""Tests for the event ledger: atomic create, capacity guard, update and durability."""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import orjson
import pytest

from universe_events.config import ClashScope
from universe_events.data import EventRepository
from universe_events.domain import (
    CapacityError,
    ClashError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)


def _stored_records(store, slot="universe_events"):
    return store.read(slot) or []


class TestCreate:
    def test_assigns_id_and_zero_participants(self, repository, make_event):
        event = repository.create(make_event())
        assert event.id
        assert event.registered_participants == 0
        assert repository.get(event.id) == event

    def test_ids_are_unique(self, store, make_event):
        ids = iter(["dup", "dup", "dup", "fresh"])
        repository = EventRepository(store, id_factory=lambda: next(ids))
        first = repository.create(make_event(start_time="08:00", end_time="09:00"))
        second = repository.create(make_event(start_time="09:00", end_time="10:00"))
        assert (first.id, second.id) == ("dup", "fresh")

    def test_inverted_span_leaves_ledger_unchanged(self, repository, store, make_event):
        repository.create(make_event())
        before = repository.list()
        with pytest.raises(ValidationError):
            repository.create(make_event(start_time="15:00", end_time="14:00"))
        assert repository.list() == before
        assert len(_stored_records(store)) == 1

    def test_clash_names_existing_event_and_leaves_ledger_unchanged(self, repository, store, make_event):
        existing = repository.create(make_event(name="Morning Talk", start_time="10:00", end_time="11:00"))
        with pytest.raises(ClashError) as info:
            repository.create(make_event(name="Overlap", start_time="10:30", end_time="11:30"))
        assert info.value.conflict == existing
        assert repository.list() == [existing]
        assert _stored_records(store) == [existing.to_record()]

    def test_back_to_back_events_are_allowed(self, repository, make_event):
        repository.create(make_event(start_time="10:00", end_time="11:00"))
        repository.create(make_event(start_time="11:00", end_time="12:00"))
        assert len(repository) == 2

    def test_location_scope(self, store, make_event):
        repository = EventRepository(store, clash_scope=ClashScope.LOCATION)
        repository.create(make_event(location="Hall A"))
        repository.create(make_event(location="Hall B"))
        with pytest.raises(ClashError):
            repository.create(make_event(location="Hall B", start_time="10:30", end_time="10:45"))


class TestRegister:
    def test_increments_and_persists(self, repository, store, make_event):
        event = repository.create(make_event(capacity=2))
        updated = repository.register(event.id)
        assert updated.registered_participants == 1
        assert _stored_records(store)[0]["registeredParticipants"] == 1

    def test_unknown_id(self, repository):
        with pytest.raises(NotFoundError):
            repository.register("nope")

    def test_full_event_keeps_count(self, repository, store, make_event):
        event = repository.create(make_event(capacity=1))
        repository.register(event.id)
        with pytest.raises(CapacityError):
            repository.register(event.id)
        assert repository.get(event.id).registered_participants == 1
        assert _stored_records(store)[0]["registeredParticipants"] == 1

    def test_concurrent_registrations_for_last_seat(self, repository, make_event):
        event = repository.create(make_event(capacity=3))
        repository.register(event.id)
        repository.register(event.id)
        workers = 12
        barrier = threading.Barrier(workers)

        def attempt(_):
            barrier.wait()
            try:
                repository.register(event.id)
            except CapacityError:
                return "full"
            return "ok"

        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(pool.map(attempt, range(workers)))

        assert outcomes.count("ok") == 1
        assert outcomes.count("full") == workers - 1
        assert repository.get(event.id).registered_participants == 3


def test_concurrent_overlapping_creates(repository, make_event):
    workers = 8
    barrier = threading.Barrier(workers)

    def attempt(index):
        barrier.wait()
        try:
            repository.create(make_event(name=f"Talk {index}", start_time="10:00", end_time="11:00"))
        except ClashError:
            return "clash"
        return "ok"

    with ThreadPoolExecutor(max_workers=workers) as pool:
        outcomes = list(pool.map(attempt, range(workers)))

    assert outcomes.count("ok") == 1
    assert len(repository) == 1


class TestUpdate:
    def test_merges_fields(self, repository, store, make_event):
        event = repository.create(make_event())
        updated = repository.update(event.id, {"description": "New agenda", "location": "Hall B"})
        assert updated.description == "New agenda"
        assert updated.location == "Hall B"
        assert updated.id == event.id
        assert _stored_records(store)[0]["location"] == "Hall B"

    def test_unknown_id(self, repository):
        with pytest.raises(NotFoundError):
            repository.update("nope", {"name": "x"})

    def test_moving_onto_another_event_clashes(self, repository, make_event):
        repository.create(make_event(start_time="10:00", end_time="11:00"))
        other = repository.create(make_event(start_time="12:00", end_time="13:00"))
        with pytest.raises(ClashError):
            repository.update(other.id, {"startTime": "10:30"})
        assert repository.get(other.id) == other

    def test_reschedule_within_own_slot(self, repository, make_event):
        event = repository.create(make_event(start_time="10:00", end_time="11:00"))
        updated = repository.update(event.id, {"endTime": "11:30"})
        assert updated.end_time == "11:30"

    def test_inverted_span_is_rejected(self, repository, make_event):
        event = repository.create(make_event())
        with pytest.raises(ValidationError):
            repository.update(event.id, {"endTime": "09:00"})
        assert repository.get(event.id) == event

    @pytest.mark.parametrize("updates", [["location"], "Hall B", None])
    def test_updates_must_be_a_mapping(self, repository, make_event, updates):
        event = repository.create(make_event())
        with pytest.raises(ValidationError, match="must be a mapping"):
            repository.update(event.id, updates)
        assert repository.get(event.id) == event

    def test_moving_to_new_date(self, repository, make_event):
        event = repository.create(make_event())
        updated = repository.update(event.id, {"date": "2024-05-20"})
        assert updated.date == date(2024, 5, 20)

    def test_capacity_cannot_drop_below_registrations(self, repository, make_event):
        event = repository.create(make_event(capacity=3))
        repository.register(event.id)
        repository.register(event.id)
        with pytest.raises(ValidationError):
            repository.update(event.id, {"capacity": 1})
        assert repository.update(event.id, {"capacity": 2}).is_full

    def test_id_cannot_change(self, repository, make_event):
        event = repository.create(make_event())
        with pytest.raises(ValidationError):
            repository.update(event.id, {"id": "other"})

    def test_no_op_update_skips_write(self, memory_store, make_event):
        repository = EventRepository(memory_store)
        event = repository.create(make_event())
        writes = memory_store.writes
        assert repository.update(event.id, {"name": event.name}) == event
        assert memory_store.writes == writes


class TestDurability:
    def test_reload_round_trip(self, store, make_event):
        repository = EventRepository(store)
        first = repository.create(make_event(start_time="08:00", end_time="09:00"))
        second = repository.create(make_event(name="Quiz", start_time="09:00", end_time="10:00"))
        repository.register(second.id)

        reloaded = EventRepository(store)
        assert reloaded.list() == repository.list()
        assert [event.to_record() for event in reloaded.list()] == _stored_records(store)
        assert reloaded.get(first.id) == first

    def test_reads_existing_saved_data(self, store):
        record = {
            "id": "k3j9x2a",
            "name": "Hackathon",
            "description": "## Build things",
            "date": "2024-05-20",
            "startTime": "09:00",
            "endTime": "17:00",
            "location": "Innovation Lab",
            "capacity": 50,
            "registeredParticipants": 12,
            "organizer": "CS Society",
        }
        store.write("universe_events", [record])
        assert EventRepository(store).get("k3j9x2a").to_record() == record

    @pytest.mark.parametrize(
        "raw",
        [
            b"not json at all",
            b'{"events": []}',
            b'[{"id": "x"}]',
            b'["just a string"]',
            (
                b'[{"id": "inv1", "name": "Backwards", "date": "2024-05-20", "startTime": "12:00",'
                b' "endTime": "11:00", "location": "Hall A", "capacity": 5, "organizer": "Club"}]'
            ),
        ],
    )
    def test_malformed_slot_starts_empty(self, store, raw, caplog):
        path = store.path_for("universe_events")
        path.parent.mkdir(parents=True)
        path.write_bytes(raw)
        with caplog.at_level("WARNING"):
            repository = EventRepository(store)
        assert repository.list() == []
        assert "starting empty" in caplog.text

    def test_write_failure_leaves_state_untouched(self, memory_store, make_event):
        repository = EventRepository(memory_store)
        event = repository.create(make_event(capacity=5))
        memory_store.fail_writes = True

        with pytest.raises(PersistenceError):
            repository.create(make_event(start_time="12:00", end_time="13:00"))
        with pytest.raises(PersistenceError):
            repository.register(event.id)
        with pytest.raises(PersistenceError):
            repository.update(event.id, {"name": "Renamed"})

        assert repository.list() == [event]
        assert memory_store.slots["universe_events"] == [event.to_record()]

    def test_custom_slot_name(self, store, make_event):
        repository = EventRepository(store, slot="campus_events")
        repository.create(make_event())
        assert orjson.loads(store.path_for("campus_events").read_bytes())[0]["name"] == "Robotics Meetup"


def test_list_returns_a_snapshot(repository, make_event):
    repository.create(make_event())
    listing = repository.list()
    listing.clear()
    assert len(repository.list()) == 1
