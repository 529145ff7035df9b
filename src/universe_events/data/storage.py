from __future__ import annotations

import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Any, Callable, Optional, Protocol

import orjson

from ..domain import PersistenceError

logger = logging.getLogger(__name__)


class SlotStore(Protocol):
    """Durable key-value store holding one JSON document per named slot."""

    def read(self, slot: str) -> Optional[Any]:
        ...

    def write(self, slot: str, payload: Any) -> None:
        ...


class JsonSlotStore:
    """Stores each slot as ``<directory>/<slot>.json``, replaced atomically on write."""

    def __init__(
        self,
        directory: Path,
        *,
        write_retries: int = 2,
        backoff_seconds: float = 0.05,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._directory = directory
        self._write_retries = max(write_retries, 0)
        self._backoff_seconds = backoff_seconds
        self._sleep = sleep

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, slot: str) -> Path:
        if not slot or "/" in slot or "\\" in slot or slot.startswith("."):
            raise ValueError(f"Invalid slot name: {slot!r}")
        return self._directory / f"{slot}.json"

    def read(self, slot: str) -> Optional[Any]:
        path = self.path_for(slot)
        if not path.exists():
            return None
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise PersistenceError(f"Could not read slot {slot!r}: {exc}") from exc
        if not raw.strip():
            return None
        try:
            return orjson.loads(raw)
        except orjson.JSONDecodeError as exc:
            raise PersistenceError(f"Slot {slot!r} does not hold valid JSON: {exc}") from exc

    def write(self, slot: str, payload: Any) -> None:
        path = self.path_for(slot)
        data = orjson.dumps(payload, option=orjson.OPT_INDENT_2) + b"\n"
        attempts = self._write_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                self._replace(path, data)
                return
            except OSError as exc:
                if attempt == attempts:
                    raise PersistenceError(f"Could not write slot {slot!r}: {exc}") from exc
                logger.warning("Write to slot %s failed (attempt %s/%s): %s", slot, attempt, attempts, exc)
                self._sleep(self._backoff_seconds * attempt)

    def _replace(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}-", suffix=".json", dir=str(path.parent))
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        finally:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)


__all__ = ["JsonSlotStore", "SlotStore"]
