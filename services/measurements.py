"""Display helpers derived from device groups."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple

from models.records import Coordinates, DeviceGroup, SensorReading

_MAX_TEXT_LENGTH = 20

# Substring -> unit, checked in order.
UNIT_HINTS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("temp", "celsius"), "°C"),
    (("fahrenheit",), "°F"),
    (("humidity",), "%"),
    (("pressure",), "hPa"),
    (("voltage",), "V"),
    (("current",), "A"),
    (("power", "watt"), "W"),
    (("throughput", "bps"), "bps"),
    (("latency", "ping"), "ms"),
    (("percent", "obstruction"), "%"),
    (("snr", "signal"), "dB"),
    (("altitude",), "m"),
    (("speed",), "m/s"),
)


@dataclass(frozen=True)
class Measurement:
    key: str
    value: str
    unit: str = ""


def unit_for(key: str) -> str:
    lowered = key.lower()
    for needles, unit in UNIT_HINTS:
        if any(needle in lowered for needle in needles):
            return unit
    return ""


def format_value(value: float, key: str) -> str:
    lowered = key.lower()
    if "throughput" in lowered or "bps" in lowered:
        for threshold, suffix in ((1e9, "G"), (1e6, "M"), (1e3, "K")):
            if value > threshold:
                return f"{value / threshold:.2f} {suffix}"
    if isinstance(value, int) or float(value).is_integer():
        return str(int(value))
    if abs(value) < 0.01:
        return f"{value:.2e}"
    return f"{value:.2f}"


def _flatten(data: Dict[str, Any]) -> Dict[str, Any]:
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in value.items():
                flat[f"{key}_{sub_key}"] = sub_value
        else:
            flat[key] = value
    return flat


def extract_measurements(reading: SensorReading) -> List[Measurement]:
    """Flatten one level of ``reading.data`` into displayable measurements."""
    data = reading.data if isinstance(reading.data, dict) else {}
    measurements: List[Measurement] = []
    for key, value in _flatten(data).items():
        if isinstance(value, bool):
            measurements.append(Measurement(key=key, value="Yes" if value else "No"))
        elif isinstance(value, (int, float)):
            measurements.append(
                Measurement(key=key, value=format_value(value, key), unit=unit_for(key))
            )
        elif isinstance(value, str) and len(value) < _MAX_TEXT_LENGTH:
            measurements.append(Measurement(key=key, value=value))
    return measurements


def calculate_map_center(groups: Iterable[DeviceGroup]) -> Coordinates:
    located = [group.location for group in groups if group.location is not None]
    if not located:
        return Coordinates(lat=0.0, lng=0.0)
    return Coordinates(
        lat=sum(location.lat for location in located) / len(located),
        lng=sum(location.lng for location in located) / len(located),
    )


def format_sensor_type(value: str) -> str:
    spaced = re.sub(r"([A-Z])", r" \1", value.replace("_", " ")).strip()
    return spaced[:1].upper() + spaced[1:]
