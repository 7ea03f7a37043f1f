"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from models.records import ClientInfo, Coordinates, DeviceGroup, LocationSource, ResolvedLocation, SensorReading
from services.coalesce import StatsSources, SummaryMetrics
from services.measurements import Measurement, extract_measurements, format_sensor_type

Number = Union[int, float]


class ReadingsRequest(BaseModel):
    """A batch of raw readings exactly as the fetch layer returned them."""

    readings: List[Dict[str, Any]] = Field(default_factory=list)


class ResolveRequest(ReadingsRequest):
    client: Optional[Dict[str, Any]] = Field(
        default=None, description="Client registry entry, optionally with IP geolocation."
    )

    def client_info(self) -> Optional[ClientInfo]:
        return ClientInfo.from_dict(self.client) if self.client is not None else None


class ClientsLocationsRequest(ReadingsRequest):
    clients: List[Dict[str, Any]] = Field(default_factory=list)

    def client_infos(self) -> List[ClientInfo]:
        return [ClientInfo.from_dict(raw) for raw in self.clients]


class CoordinatesOut(BaseModel):
    lat: float
    lng: float

    @classmethod
    def from_domain(cls, coordinates: Coordinates) -> "CoordinatesOut":
        return cls(lat=coordinates.lat, lng=coordinates.lng)


class ReadingOut(BaseModel):
    client_id: Optional[str] = None
    timestamp: Optional[str] = None
    device_id: Optional[str] = None
    sensor_type: Optional[str] = None
    device_type: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_domain(cls, reading: SensorReading) -> "ReadingOut":
        return cls(
            client_id=reading.client_id,
            timestamp=reading.timestamp,
            device_id=reading.device_id,
            sensor_type=reading.sensor_type,
            device_type=reading.device_type,
            data=reading.data,
        )


class MeasurementOut(BaseModel):
    key: str
    value: str
    unit: str = ""

    @classmethod
    def from_domain(cls, measurement: Measurement) -> "MeasurementOut":
        return cls(key=measurement.key, value=measurement.value, unit=measurement.unit)


class DeviceGroupOut(BaseModel):
    """One device aggregate with its arrival-ordered history."""

    device_id: str
    device_type: str
    label: str
    client_id: str
    reading_count: int = Field(..., ge=1)
    latest: ReadingOut
    readings: List[ReadingOut] = Field(default_factory=list)
    location: Optional[CoordinatesOut] = None
    measurements: List[MeasurementOut] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, group: DeviceGroup) -> "DeviceGroupOut":
        return cls(
            device_id=group.device_id,
            device_type=group.device_type,
            label=format_sensor_type(group.device_type),
            client_id=group.client_id,
            reading_count=len(group.readings),
            latest=ReadingOut.from_domain(group.latest),
            readings=[ReadingOut.from_domain(reading) for reading in group.readings],
            location=CoordinatesOut.from_domain(group.location) if group.location else None,
            measurements=[
                MeasurementOut.from_domain(measurement)
                for measurement in extract_measurements(group.latest)
            ],
        )


class GroupResponse(BaseModel):
    devices: List[DeviceGroupOut] = Field(default_factory=list)
    map_center: CoordinatesOut


class ResolvedLocationOut(BaseModel):
    """Best-guess location; absent coordinates mean no location is known."""

    model_config = ConfigDict(populate_by_name=True)

    source: LocationSource
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    altitude: Optional[float] = None
    accuracy: Optional[float] = None
    city: Optional[str] = None
    country: Optional[str] = None
    device_id: Optional[str] = Field(default=None, alias="deviceId")
    timestamp: Optional[str] = None

    @classmethod
    def from_domain(cls, location: ResolvedLocation) -> "ResolvedLocationOut":
        return cls(**asdict(location))


class DeviceLocationsResponse(BaseModel):
    locations: List[ResolvedLocationOut] = Field(default_factory=list)


class ClientsLocationsResponse(BaseModel):
    locations: Dict[str, ResolvedLocationOut] = Field(default_factory=dict)


class StatsSourcesIn(BaseModel):
    """Aggregate-statistics responses from the dashboard endpoints."""

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

    def to_domain(self) -> StatsSources:
        return StatsSources(**self.model_dump())


class SummaryMetricsOut(BaseModel):
    total_readings: Number = 0
    total_batches: Number = 0
    total_clients: Number = 0
    total_devices: Number = 0
    sensor_types_count: Number = 0
    active_devices_1h: Number = 0
    readings_1h: Number = 0
    avg_readings_per_hour: Optional[Number] = None
    active_alerts: Number = 0
    wifi_networks: Number = 0
    bluetooth_devices: Number = 0
    aircraft_count: Number = 0
    lora_devices: Number = 0
    current_power_watts: Optional[Number] = None
    time_ranges: Optional[Dict[str, Any]] = None

    @classmethod
    def from_domain(cls, metrics: SummaryMetrics) -> "SummaryMetricsOut":
        return cls(**asdict(metrics))
