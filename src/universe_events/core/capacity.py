from __future__ import annotations

from dataclasses import replace
from typing import Sequence, Tuple

from ..domain import CapacityError, Event, NotFoundError


def register(event_id: str, existing: Sequence[Event]) -> Tuple[int, Event]:
    """Return the position and the incremented copy of ``event_id``.

    Callers must hold the ledger's write lock so that the check and the
    increment cannot interleave with another registration.
    """

    for index, event in enumerate(existing):
        if event.id != event_id:
            continue
        if event.registered_participants >= event.capacity:
            raise CapacityError(event)
        return index, replace(event, registered_participants=event.registered_participants + 1)
    raise NotFoundError(event_id)


__all__ = ["register"]
