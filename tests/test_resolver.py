from __future__ import annotations

from typing import Any, Dict, Optional

import pytest

from models.records import ClientInfo, ClientLocation, Coordinates, DeviceGroup, LocationSource, ResolvedLocation, SensorReading
from services.grouping import DeviceGrouper
from services.resolver import SOURCE_PRIORITY, LocationResolver


@pytest.fixture()
def resolver() -> LocationResolver:
    return LocationResolver()


def _device(
    device_type: str,
    data: Dict[str, Any],
    device_id: Optional[str] = None,
    location: Optional[Coordinates] = None,
) -> DeviceGroup:
    reading = SensorReading(
        client_id="clientA",
        sensor_type=device_type,
        timestamp="2024-01-01T00:00:00Z",
        data=data,
    )
    return DeviceGroup(
        device_id=device_id or device_type,
        device_type=device_type,
        client_id="clientA",
        latest=reading,
        readings=[reading],
        location=location,
    )


def _client(latitude: Optional[float] = None, longitude: Optional[float] = None) -> ClientInfo:
    return ClientInfo(
        client_id="clientA",
        location=ClientLocation(latitude=latitude, longitude=longitude, city="Lyon", country="FR"),
    )


def test_priority_table_is_fixed() -> None:
    assert SOURCE_PRIORITY[LocationSource.starlink] == 1
    assert SOURCE_PRIORITY[LocationSource.geolocated] == 9
    assert SOURCE_PRIORITY[LocationSource.adsb] == 99
    assert SOURCE_PRIORITY[LocationSource.unknown] == 100
    assert set(SOURCE_PRIORITY) == set(LocationSource)


def test_resolve_without_anything_is_unknown(resolver: LocationResolver) -> None:
    resolved = resolver.resolve(None, [])

    assert resolved == ResolvedLocation(source=LocationSource.unknown)
    assert not resolved.has_coordinates


def test_starlink_beats_gps_in_either_order(resolver: LocationResolver) -> None:
    starlink = _device("starlink_dish", {"starlink": {"latitude": 34.5, "longitude": -118.2}})
    gps = _device("gps_receiver", {"latitude": 34.0, "longitude": -118.0})

    for devices in ([starlink, gps], [gps, starlink]):
        resolved = resolver.resolve(None, devices)
        assert resolved.source is LocationSource.starlink
        assert (resolved.latitude, resolved.longitude) == (34.5, -118.2)
        assert resolved.device_id == "starlink_dish"
        assert resolved.timestamp == "2024-01-01T00:00:00Z"


def test_client_geolocation_outranks_adsb(resolver: LocationResolver) -> None:
    adsb = _device("adsb_receiver", {"receiver_location": {"latitude": 1.0, "longitude": 1.0}})

    resolved = resolver.resolve(_client(45.75, 4.85), [adsb])

    assert resolved == ResolvedLocation(
        source=LocationSource.geolocated,
        latitude=45.75,
        longitude=4.85,
        city="Lyon",
        country="FR",
    )


def test_adsb_used_when_nothing_else_exists(resolver: LocationResolver) -> None:
    adsb = _device("adsb_receiver", {"receiver_location": {"latitude": 1.0, "longitude": 2.0}})

    resolved = resolver.resolve(_client(), [adsb])

    assert resolved.source is LocationSource.adsb
    assert (resolved.latitude, resolved.longitude) == (1.0, 2.0)


def test_ties_resolve_by_device_position(resolver: LocationResolver) -> None:
    first = _device("wifi_scanner", {"latitude": 1.0, "longitude": 1.0}, device_id="wifi-1")
    second = _device("wifi_scanner_2", {"latitude": 2.0, "longitude": 2.0}, device_id="wifi-2")

    assert resolver.resolve(None, [first, second]).device_id == "wifi-1"
    assert resolver.resolve(None, [second, first]).device_id == "wifi-2"


def test_precomputed_location_carries_city_and_country(resolver: LocationResolver) -> None:
    device = _device(
        "gps_receiver",
        {"city": "Tromsø", "country": "NO", "gps": {"latitude": 9.0, "longitude": 9.0}},
        location=Coordinates(lat=69.6, lng=18.9),
    )

    resolved = resolver.resolve(None, [device])

    assert resolved.source is LocationSource.gps
    assert (resolved.latitude, resolved.longitude) == (69.6, 18.9)
    assert (resolved.city, resolved.country) == ("Tromsø", "NO")


def test_devices_without_coordinates_fall_back_to_client(resolver: LocationResolver) -> None:
    thermal = _device("thermal_probe", {"temperature_c": 21.0})

    resolved = resolver.resolve(_client(10.0, 20.0), [thermal])

    assert resolved.source is LocationSource.geolocated


def test_client_with_partial_coordinates_is_ignored(resolver: LocationResolver) -> None:
    resolved = resolver.resolve(_client(latitude=10.0), [])

    assert resolved.source is LocationSource.unknown
    assert resolved.latitude is None


def test_device_locations_keep_device_order(resolver: LocationResolver) -> None:
    devices = [
        _device("gps_receiver", {"latitude": 1.0, "longitude": 1.0}),
        _device("thermal_probe", {"temperature_c": 21.0}),
        _device("starlink_dish", {"starlink": {"latitude": 2.0, "longitude": 2.0}}),
    ]

    sources = [location.source for location in resolver.device_locations(devices)]

    assert sources == [LocationSource.gps, LocationSource.starlink]


def test_enrich_fills_missing_locations_only(resolver: LocationResolver) -> None:
    known = _device("gps_receiver", {}, location=Coordinates(lat=5.0, lng=5.0))
    extractable = _device("lora_node", {"gateway": {"lat": 1.0, "lng": 2.0}})
    bare = _device("system_monitor", {"cpu_percent": 12})

    enriched = resolver.enrich([known, extractable, bare])

    assert enriched[0] is known
    assert enriched[1] is not extractable
    assert enriched[1].location == Coordinates(lat=1.0, lng=2.0)
    assert extractable.location is None
    assert enriched[2] is bare


def test_scenario_readings_to_resolved_location(resolver: LocationResolver) -> None:
    readings = [
        {"device_type": "starlink_dish", "data": {"starlink": {"latitude": 34.5, "longitude": -118.2}}},
        {"device_type": "gps_receiver", "data": {"latitude": 34.0, "longitude": -118.0}},
    ]

    resolved = resolver.resolve(None, DeviceGrouper().group(readings))

    assert resolved.source is LocationSource.starlink
    assert (resolved.latitude, resolved.longitude) == (34.5, -118.2)
