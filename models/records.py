"""Domain models shared across services."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class LocationSource(str, Enum):
    """Where a resolved location came from."""

    starlink = "starlink"
    gps = "gps"
    lora = "lora"
    arduino = "arduino"
    adsb = "adsb"
    thermal = "thermal"
    system = "system"
    wifi = "wifi"
    bluetooth = "bluetooth"
    geolocated = "geolocated"
    unknown = "unknown"


def as_coordinate(value: Any) -> Optional[float]:
    """Return ``value`` as a float when it is a real, finite number."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def as_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def as_identifier(value: Any) -> Optional[str]:
    """Ids arrive as strings or plain integers; integers are stringified."""

    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return None


@dataclass(slots=True)
class SensorReading:
    """A single observation as delivered by the fetch layer."""

    client_id: Optional[str] = None
    timestamp: Optional[str] = None
    device_id: Optional[str] = None
    sensor_type: Optional[str] = None
    device_type: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "SensorReading":
        data = raw.get("data")
        return cls(
            client_id=as_identifier(raw.get("client_id")),
            timestamp=as_text(raw.get("timestamp")),
            device_id=as_identifier(raw.get("device_id")),
            sensor_type=as_identifier(raw.get("sensor_type")),
            device_type=as_identifier(raw.get("device_type")),
            data=dict(data) if isinstance(data, Mapping) else {},
            latitude=as_coordinate(raw.get("latitude")),
            longitude=as_coordinate(raw.get("longitude")),
        )


@dataclass(frozen=True, slots=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class ExtractedLocation:
    """Coordinates pulled out of a payload plus whatever extras sat beside them."""

    lat: float
    lng: float
    altitude: Optional[float] = None
    accuracy: Optional[float] = None
    city: Optional[str] = None
    country: Optional[str] = None


@dataclass
class DeviceGroup:
    """Readings for one ``(client_id, sensor_type)`` key."""

    device_id: str
    device_type: str
    client_id: str
    latest: SensorReading
    readings: List[SensorReading] = field(default_factory=list)
    location: Optional[Coordinates] = None
    latest_at: Optional[datetime] = field(default=None, repr=False, compare=False)


@dataclass(frozen=True, slots=True)
class ClientLocation:
    """IP-geolocation data attached to a client by the registry."""

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    city: Optional[str] = None
    country: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ClientLocation":
        return cls(
            latitude=as_coordinate(raw.get("latitude")),
            longitude=as_coordinate(raw.get("longitude")),
            city=as_text(raw.get("city")),
            country=as_text(raw.get("country")),
        )


@dataclass(frozen=True, slots=True)
class ClientInfo:
    client_id: str
    hostname: Optional[str] = None
    ip_address: Optional[str] = None
    state: Optional[str] = None
    last_seen: Optional[str] = None
    location: Optional[ClientLocation] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ClientInfo":
        location = raw.get("location")
        return cls(
            client_id=as_identifier(raw.get("client_id")) or "unknown",
            hostname=as_text(raw.get("hostname")),
            ip_address=as_text(raw.get("ip_address")),
            state=as_text(raw.get("state")),
            last_seen=as_text(raw.get("last_seen")),
            location=ClientLocation.from_dict(location) if isinstance(location, Mapping) else None,
        )


@dataclass(frozen=True, slots=True)
class ResolvedLocation:
    """The single best location picked for a client."""

    source: LocationSource
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    altitude: Optional[float] = None
    accuracy: Optional[float] = None
    city: Optional[str] = None
    country: Optional[str] = None
    device_id: Optional[str] = None
    timestamp: Optional[str] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None
