from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from platformdirs import user_data_dir

load_dotenv()

APP_NAME = "UniVerse"
APP_AUTHOR = "UniVerse"
DEFAULT_EVENTS_SLOT = "universe_events"


class ClashScope(str, Enum):
    GLOBAL = "global"
    LOCATION = "location"


@dataclass(frozen=True)
class LlmSettings:
    api_key: Optional[str]
    model: str
    base_url: Optional[str]
    organization: Optional[str]
    project: Optional[str]
    temperature: float = 0.7
    max_output_tokens: int = 800

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.model)

    @property
    def missing_env_vars(self) -> list[str]:
        missing = []
        if not self.api_key:
            missing.append("OPENAI_API_KEY")
        if not self.model:
            missing.append("OPENAI_MODEL")
        return missing


@dataclass(frozen=True)
class StorageSettings:
    data_dir: Path
    events_slot: str
    write_retries: int
    write_backoff_seconds: float


@dataclass(frozen=True)
class LedgerSettings:
    clash_scope: ClashScope


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    log_dir: Path


@dataclass(frozen=True)
class AppSettings:
    llm: LlmSettings
    storage: StorageSettings
    ledger: LedgerSettings
    logging: LoggingSettings


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return max(int(raw), 0)
    except ValueError:
        return default


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return max(float(raw), 0.0)
    except ValueError:
        return default


def _clash_scope_from_env(name: str) -> ClashScope:
    raw = (os.getenv(name) or "").strip().lower()
    try:
        return ClashScope(raw)
    except ValueError:
        return ClashScope.GLOBAL


def load_settings() -> AppSettings:
    """Build settings from the current environment, bypassing the cache."""

    data_dir = Path(os.getenv("UNIVERSE_DATA_DIR") or user_data_dir(APP_NAME, APP_AUTHOR))

    llm = LlmSettings(
        api_key=os.getenv("OPENAI_API_KEY"),
        model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        base_url=os.getenv("OPENAI_BASE_URL"),
        organization=os.getenv("OPENAI_ORG"),
        project=os.getenv("OPENAI_PROJECT"),
    )

    storage = StorageSettings(
        data_dir=data_dir,
        events_slot=os.getenv("UNIVERSE_EVENTS_SLOT", DEFAULT_EVENTS_SLOT),
        write_retries=_int_from_env("UNIVERSE_WRITE_RETRIES", 2),
        write_backoff_seconds=_float_from_env("UNIVERSE_WRITE_BACKOFF_SECONDS", 0.05),
    )

    ledger = LedgerSettings(clash_scope=_clash_scope_from_env("UNIVERSE_CLASH_SCOPE"))

    logging_settings = LoggingSettings(
        level=os.getenv("UNIVERSE_LOG_LEVEL", "INFO").upper(),
        log_dir=Path(os.getenv("UNIVERSE_LOG_DIR") or data_dir / "logs"),
    )

    return AppSettings(llm=llm, storage=storage, ledger=ledger, logging=logging_settings)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return load_settings()
