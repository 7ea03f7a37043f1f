from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_SERVICE_NAME_ENV = "RECONCILER_SERVICE_NAME"
_READING_WINDOW_ENV = "RECONCILER_READING_WINDOW"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    service_name: str
    reading_window: int
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_reading_window(default: int) -> int:
    value = os.getenv(_READING_WINDOW_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        service_name=_read_str_env(_SERVICE_NAME_ENV, "Sensor Reconciler"),
        reading_window=_read_reading_window(5000),
        log_level=_read_log_level("INFO"),
    )
