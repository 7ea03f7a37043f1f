"""Fold flat reading lists into per-device aggregates."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar, Union

from models.records import DeviceGroup, SensorReading
from services.coalesce import first_defined
from services.extractors import extract_reading_location

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"

ReadingLike = Union[SensorReading, Mapping[str, Any]]
T = TypeVar("T")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware UTC datetime, or ``None``."""

    if not isinstance(value, str):
        return None
    candidate = value.strip()
    if not candidate:
        return None

    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed.astimezone(timezone.utc)


def window_readings(readings: Sequence[T], size: Optional[int]) -> Sequence[T]:
    """Keep the trailing ``size`` readings in arrival order; ``0``/``None`` keeps all."""

    if not size or len(readings) <= size:
        return readings
    return readings[-size:]


def coerce_reading(reading: ReadingLike) -> SensorReading:
    if isinstance(reading, SensorReading):
        return reading
    if not isinstance(reading, Mapping):
        return SensorReading()
    return SensorReading.from_dict(reading)


def group_key(reading: SensorReading) -> Tuple[str, str]:
    sensor_type = first_defined([reading.sensor_type, reading.device_type, UNKNOWN])
    client_id = first_defined([reading.client_id, UNKNOWN])
    return client_id, sensor_type


class DeviceGrouper:
    """Pure grouping component; every call starts from an empty index.

    The whole input is re-folded on each call, so callers should window the
    readings (see :func:`window_readings`) when histories grow large.
    """

    def group(self, readings: Iterable[ReadingLike]) -> List[DeviceGroup]:
        groups: Dict[Tuple[str, str], DeviceGroup] = {}
        malformed = 0

        for raw in readings:
            reading = coerce_reading(raw)
            key = group_key(reading)
            client_id, sensor_type = key
            parsed = parse_timestamp(reading.timestamp)
            if parsed is None:
                malformed += 1
                logger.debug(
                    "Reading has an unparseable timestamp; kept in history only",
                    extra={
                        "client_id": client_id,
                        "sensor_type": sensor_type,
                        "timestamp": reading.timestamp,
                        "reason": "malformed timestamp",
                    },
                )

            group = groups.get(key)
            if group is None:
                group = DeviceGroup(
                    device_id=first_defined([reading.device_id, sensor_type]),
                    device_type=sensor_type,
                    client_id=client_id,
                    latest=reading,
                    latest_at=parsed,
                )
                groups[key] = group
            elif parsed is not None and (group.latest_at is None or parsed > group.latest_at):
                group.latest = reading
                group.latest_at = parsed

            group.readings.append(reading)

            location = extract_reading_location(reading)
            if location is not None:
                group.location = location

        logger.debug(
            "Grouped readings into devices",
            extra={
                "reading_count": sum(len(group.readings) for group in groups.values()),
                "group_count": len(groups),
                "reason": f"{malformed} malformed timestamps" if malformed else None,
            },
        )
        return list(groups.values())
