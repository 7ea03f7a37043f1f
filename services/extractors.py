"""Pull coordinate pairs out of arbitrarily nested sensor payloads.

Payload shapes vary by sensor family and firmware revision, so extraction is
expressed as ordered tables of probes. Every probe returns ``None`` when its
shape is absent or malformed and extraction moves on to the next one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from models.records import (
    Coordinates,
    ExtractedLocation,
    LocationSource,
    SensorReading,
    as_coordinate,
    as_text,
)

_NUMERIC_EXTRAS = ("altitude", "accuracy")
_TEXT_EXTRAS = ("city", "country")


@dataclass(frozen=True)
class CoordinateShape:
    """One conventional way of spelling a coordinate pair.

    ``container`` names the nested object holding the pair (``None`` for the
    probed mapping itself). ``lng_keys`` are tried in order, and ``extras``
    lists the optional fields read from the same object.
    """

    container: Optional[str]
    lat_key: str
    lng_keys: Tuple[str, ...]
    extras: Tuple[str, ...] = ()

    def probe(self, payload: Mapping[str, Any]) -> Optional[ExtractedLocation]:
        target = payload if self.container is None else payload.get(self.container)
        if not isinstance(target, Mapping):
            return None

        lat = as_coordinate(target.get(self.lat_key))
        if lat is None:
            return None
        lng = None
        for key in self.lng_keys:
            lng = as_coordinate(target.get(key))
            if lng is not None:
                break
        if lng is None:
            return None

        extras: Dict[str, Any] = {}
        for key in self.extras:
            if key in _NUMERIC_EXTRAS:
                extras[key] = as_coordinate(target.get(key))
            elif key in _TEXT_EXTRAS:
                extras[key] = as_text(target.get(key))
        return ExtractedLocation(lat=lat, lng=lng, **extras)


GENERIC_SHAPES: Tuple[CoordinateShape, ...] = (
    CoordinateShape(None, "latitude", ("longitude",), ("altitude", "accuracy", "city", "country")),
    CoordinateShape(None, "lat", ("lng", "lon"), ("altitude",)),
    CoordinateShape("location", "latitude", ("longitude",), ("altitude", "city", "country")),
    CoordinateShape("location", "lat", ("lng",)),
    CoordinateShape("gps_location", "latitude", ("longitude",), ("altitude", "accuracy")),
    CoordinateShape("location_detail", "latitude", ("longitude",), ("altitude", "city", "country")),
    CoordinateShape("coordinates", "latitude", ("longitude",)),
    CoordinateShape("coordinates", "lat", ("lng",)),
    CoordinateShape("position", "latitude", ("longitude",), ("altitude",)),
)

# Nested objects probed before the top-level payload, per category.
CATEGORY_PATHS: Dict[LocationSource, Tuple[Tuple[str, ...], ...]] = {
    LocationSource.starlink: (("starlink",),),
    LocationSource.gps: (("gps",), ("gnss",)),
    LocationSource.arduino: (("arduino",), ("sensors", "gps")),
    LocationSource.lora: (("lora",), ("gateway",)),
    LocationSource.adsb: (("receiver_location",), ("adsb",), ("station_location",)),
}


def _descend(payload: Mapping[str, Any], path: Sequence[str]) -> Optional[Mapping[str, Any]]:
    current: Any = payload
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current if isinstance(current, Mapping) else None


def extract_generic(payload: Any) -> Optional[ExtractedLocation]:
    """Try every generic shape against ``payload``; first match wins."""

    if not isinstance(payload, Mapping):
        return None
    for shape in GENERIC_SHAPES:
        found = shape.probe(payload)
        if found is not None:
            return found
    return None


def extract(category: LocationSource, payload: Any) -> Optional[ExtractedLocation]:
    """Extract a location using the probe chain for ``category``."""

    if not isinstance(payload, Mapping):
        return None
    for path in CATEGORY_PATHS.get(category, ()):
        nested = _descend(payload, path)
        if nested is None:
            continue
        found = extract_generic(nested)
        if found is not None:
            return found
    return extract_generic(payload)


_READING_SHAPES: Tuple[Tuple[Tuple[str, ...], CoordinateShape], ...] = (
    (("starlink",), CoordinateShape(None, "latitude", ("longitude",))),
    (("starlink",), CoordinateShape("location_detail", "latitude", ("longitude",))),
    (("starlink",), CoordinateShape("gps_location", "latitude", ("longitude",))),
    (("gps",), CoordinateShape(None, "latitude", ("longitude",))),
    ((), CoordinateShape(None, "latitude", ("longitude",))),
)


def extract_reading_location(reading: SensorReading) -> Optional[Coordinates]:
    """Cheap per-reading probe used while folding readings into groups."""

    if reading.latitude is not None and reading.longitude is not None:
        return Coordinates(lat=reading.latitude, lng=reading.longitude)

    data = reading.data
    if not isinstance(data, Mapping):
        return None
    for path, shape in _READING_SHAPES:
        target = _descend(data, path) if path else data
        if target is None:
            continue
        found = shape.probe(target)
        if found is not None:
            return Coordinates(lat=found.lat, lng=found.lng)
    return None
