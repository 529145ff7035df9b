"""Configuration models and helpers."""

from __future__ import annotations

from .settings import (
    AppSettings,
    ClashScope,
    LedgerSettings,
    LlmSettings,
    LoggingSettings,
    StorageSettings,
    get_settings,
    load_settings,
)

__all__ = [
    "AppSettings",
    "ClashScope",
    "LedgerSettings",
    "LlmSettings",
    "LoggingSettings",
    "StorageSettings",
    "get_settings",
    "load_settings",
]
