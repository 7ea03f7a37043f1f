from __future__ import annotations

from models.records import Coordinates, DeviceGroup, SensorReading
from services.measurements import (
    Measurement,
    calculate_map_center,
    extract_measurements,
    format_sensor_type,
    format_value,
    unit_for,
)


def test_extract_measurements_flattens_one_level() -> None:
    reading = SensorReading(
        data={
            "temperature_c": 21.456,
            "online": True,
            "status": "ok",
            "firmware": "x" * 40,
            "starlink": {"ping_latency": 38, "nested": {"deep": 1}},
            "tags": ["a"],
        }
    )

    measurements = extract_measurements(reading)

    assert measurements == [
        Measurement(key="temperature_c", value="21.46", unit="°C"),
        Measurement(key="online", value="Yes"),
        Measurement(key="status", value="ok"),
        Measurement(key="starlink_ping_latency", value="38", unit="ms"),
    ]


def test_format_value_scales_throughput_and_small_values() -> None:
    assert format_value(2_500_000, "downlink_throughput_bps") == "2.50 M"
    assert format_value(0.004, "obstruction_fraction") == "4.00e-03"
    assert format_value(12.0, "count") == "12"


def test_unit_for_matches_first_hint() -> None:
    assert unit_for("power_watts") == "W"
    assert unit_for("signal_snr") == "dB"
    assert unit_for("nothing") == ""


def test_calculate_map_center_averages_located_groups() -> None:
    reading = SensorReading()
    groups = [
        DeviceGroup(device_id="a", device_type="gps", client_id="c", latest=reading, location=Coordinates(10.0, 20.0)),
        DeviceGroup(device_id="b", device_type="gps", client_id="c", latest=reading, location=Coordinates(20.0, 40.0)),
        DeviceGroup(device_id="c", device_type="wifi", client_id="c", latest=reading),
    ]

    assert calculate_map_center(groups) == Coordinates(lat=15.0, lng=30.0)
    assert calculate_map_center([]) == Coordinates(lat=0.0, lng=0.0)


def test_format_sensor_type() -> None:
    assert format_sensor_type("thermal_probe") == "Thermal probe"
    assert format_sensor_type("starlinkDish") == "Starlink Dish"
