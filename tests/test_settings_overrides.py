from __future__ import annotations

import logging
from typing import Iterable

from services.reconciler import build_default_service
from settings import get_settings


def _clear_caches(caches: Iterable) -> None:
    for cache in caches:
        cache.cache_clear()


def test_environment_overrides_apply(monkeypatch) -> None:
    monkeypatch.setenv("RECONCILER_SERVICE_NAME", "Fleet Locator")
    monkeypatch.setenv("RECONCILER_READING_WINDOW", "250")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    caches = (get_settings, build_default_service)
    _clear_caches(caches)

    try:
        settings = get_settings()
        service = build_default_service()

        assert settings.service_name == "Fleet Locator"
        assert settings.log_level == "DEBUG"
        assert service.reading_window == 250
    finally:
        _clear_caches(caches)


def test_invalid_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("RECONCILER_SERVICE_NAME", "   ")
    monkeypatch.setenv("RECONCILER_READING_WINDOW", "-3")
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    get_settings.cache_clear()

    try:
        settings = get_settings()

        assert settings.service_name == "Sensor Reconciler"
        assert settings.reading_window == 5000
        assert settings.log_level == "INFO"
    finally:
        get_settings.cache_clear()


def test_service_applies_reading_window() -> None:
    service = build_default_service.__wrapped__()
    service.reading_window = 2
    readings = [
        {"sensor_type": "gps", "client_id": "a", "timestamp": f"2024-01-01T0{hour}:00:00Z"}
        for hour in range(5)
    ]

    [group] = service.group_readings(readings)

    assert [reading.timestamp for reading in group.readings] == [
        "2024-01-01T03:00:00Z",
        "2024-01-01T04:00:00Z",
    ]


def test_truncating_window_logs_a_warning(caplog) -> None:
    service = build_default_service.__wrapped__()
    service.reading_window = 3
    readings = [{"sensor_type": "gps", "client_id": "a"} for _ in range(5)]

    with caplog.at_level(logging.WARNING, logger="services.reconciler"):
        service.group_readings(readings)

    [record] = [record for record in caplog.records if record.name == "services.reconciler"]
    assert record.levelno == logging.WARNING
    assert record.reading_count == 5
    assert record.reason == "kept last 3"


def test_untruncated_window_stays_quiet(caplog) -> None:
    service = build_default_service.__wrapped__()
    service.reading_window = 10

    with caplog.at_level(logging.DEBUG, logger="services.reconciler"):
        service.group_readings([{"sensor_type": "gps", "client_id": "a"}])

    assert not [record for record in caplog.records if record.name == "services.reconciler"]
