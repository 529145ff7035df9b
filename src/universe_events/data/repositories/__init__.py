"""Repositories owning first-class domain collections."""

from __future__ import annotations

from .events import EventRepository

__all__ = ["EventRepository"]
