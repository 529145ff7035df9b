"""Data access layer."""

from __future__ import annotations

from .repositories import EventRepository
from .storage import JsonSlotStore, SlotStore

__all__ = ["EventRepository", "JsonSlotStore", "SlotStore"]
