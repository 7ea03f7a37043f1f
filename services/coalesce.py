"""First-defined coalescing and dashboard summary derivation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, TypeVar

T = TypeVar("T")

LENGTH = "length"


def first_defined(candidates: Iterable[Optional[T]]) -> Optional[T]:
    """Return the first candidate that is not ``None``."""

    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def dig(source: Any, *path: str) -> Any:
    """Safe nested lookup; a trailing ``"length"`` step measures a list."""

    current = source
    for step in path:
        if step == LENGTH and isinstance(current, list):
            return len(current)
        if not isinstance(current, Mapping):
            return None
        current = current.get(step)
    return current


@dataclass
class StatsSources:
    """Raw aggregate-statistics responses, any of which may be missing."""

    global_stats: Optional[Dict[str, Any]] = None
    stats_overview: Optional[Dict[str, Any]] = None
    comprehensive: Optional[Dict[str, Any]] = None
    stats_1hr: Optional[Dict[str, Any]] = None
    dashboard_sensor_stats: Optional[Dict[str, Any]] = None
    alert_stats: Optional[Dict[str, Any]] = None
    power_summary: Optional[Dict[str, Any]] = None
    wifi_stats: Optional[Dict[str, Any]] = None
    bluetooth_stats: Optional[Dict[str, Any]] = None
    adsb_stats: Optional[Dict[str, Any]] = None
    lora_stats: Optional[Dict[str, Any]] = None
    clients: Optional[List[Any]] = None


@dataclass
class SummaryMetrics:
    total_readings: float = 0
    total_batches: float = 0
    total_clients: float = 0
    total_devices: float = 0
    sensor_types_count: float = 0
    active_devices_1h: float = 0
    readings_1h: float = 0
    avg_readings_per_hour: Optional[float] = None
    active_alerts: float = 0
    wifi_networks: float = 0
    bluetooth_devices: float = 0
    aircraft_count: float = 0
    lora_devices: float = 0
    current_power_watts: Optional[float] = None
    time_ranges: Optional[Dict[str, Any]] = None


def _as_number(value: Any) -> Optional[float]:
    """Numbers pass through; anything else counts as absent."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _count(*candidates: Any) -> Any:
    value = first_defined(_as_number(candidate) for candidate in candidates)
    return 0 if value is None else value


def _optional_number(*candidates: Any) -> Optional[float]:
    return first_defined(_as_number(candidate) for candidate in candidates)


def summarize(sources: StatsSources) -> SummaryMetrics:
    """Derive summary card values, preferring the global stats endpoint."""

    gs = sources.global_stats
    overview = sources.stats_overview
    comp = dig(sources.comprehensive, "global")
    dashboard = sources.dashboard_sensor_stats
    hourly = sources.stats_1hr

    return SummaryMetrics(
        total_readings=_count(
            dig(gs, "total_readings"),
            dig(overview, "total_readings"),
            dig(dashboard, "readings_last_24h"),
            dig(comp, "total_readings"),
            dig(comp, "database", "total_readings"),
        ),
        total_batches=_count(
            dig(gs, "total_batches"),
            dig(overview, "total_batches"),
            dig(comp, "total_batches"),
            dig(comp, "database", "total_batches"),
        ),
        total_clients=_count(
            dig(gs, "total_clients"),
            dig(comp, "total_clients"),
            dig(overview, "total_clients"),
            len(sources.clients) if sources.clients is not None else None,
        ),
        total_devices=_count(
            dig(gs, "total_devices"),
            dig(dashboard, "total_devices"),
            dig(overview, "total_devices"),
            dig(comp, "total_devices"),
        ),
        sensor_types_count=_count(
            dig(gs, "sensor_types_count"),
            dig(dashboard, "total_sensors"),
            dig(comp, "sensor_types_count"),
            dig(gs, "device_breakdown", LENGTH),
        ),
        active_devices_1h=_count(
            dig(hourly, "devices"),
            dig(comp, "activity", "last_1_hour", "active_devices_1h"),
        ),
        readings_1h=_count(
            dig(hourly, "readings"),
            dig(comp, "activity", "last_1_hour", "readings_1h"),
        ),
        avg_readings_per_hour=_optional_number(dig(comp, "activity", "avg_readings_per_hour")),
        active_alerts=_count(
            dig(sources.alert_stats, "active"),
            dig(comp, "database", "active_alerts"),
        ),
        wifi_networks=_count(
            dig(sources.wifi_stats, "unique_networks_24h"),
            dig(sources.wifi_stats, "total_networks_discovered"),
        ),
        bluetooth_devices=_count(
            dig(sources.bluetooth_stats, "unique_devices_24h"),
            dig(sources.bluetooth_stats, "total_devices_discovered"),
        ),
        aircraft_count=_count(
            dig(sources.adsb_stats, "aircraft_active"),
            dig(sources.adsb_stats, "aircraft_tracked_total"),
        ),
        lora_devices=_count(
            dig(sources.lora_stats, "total_devices"),
            dig(sources.lora_stats, "active_devices"),
        ),
        current_power_watts=_optional_number(
            dig(sources.power_summary, "total_power_watts"),
            dig(sources.power_summary, "avg_power_watts"),
        ),
        time_ranges=first_defined(
            candidate
            for candidate in (dig(comp, "time_ranges"), dig(gs, "time_ranges"))
            if isinstance(candidate, Mapping)
        ),
    )
