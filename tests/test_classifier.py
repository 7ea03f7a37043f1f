from __future__ import annotations

import pytest

from models.records import LocationSource
from services.classifier import classify, source_label


@pytest.mark.parametrize(
    ("device_type", "expected"),
    [
        ("starlink_dish_comprehensive", LocationSource.starlink),
        ("GPS_Receiver", LocationSource.gps),
        ("gnss_module", LocationSource.gps),
        ("lora_detector", LocationSource.lora),
        ("arduino_sensor_kit", LocationSource.arduino),
        ("adsb_receiver", LocationSource.adsb),
        ("aircraft_tracker", LocationSource.adsb),
        ("thermal_probe", LocationSource.thermal),
        ("temperature_probe", LocationSource.thermal),
        ("system_monitor", LocationSource.system),
        ("wifi_scanner", LocationSource.wifi),
        ("bluetooth_scanner", LocationSource.bluetooth),
        ("BLE_beacon", LocationSource.bluetooth),
        ("barometer", LocationSource.geolocated),
    ],
)
def test_classify_maps_keywords_case_insensitively(device_type: str, expected: LocationSource) -> None:
    assert classify(device_type) is expected


def test_classify_first_keyword_in_table_wins() -> None:
    assert classify("arduino_gps_shield") is LocationSource.gps
    assert classify("starlink_system_monitor") is LocationSource.starlink
    assert classify("lora_thermal_node") is LocationSource.lora


def test_classify_is_total() -> None:
    assert classify("") is LocationSource.geolocated
    assert classify(None) is LocationSource.geolocated


def test_source_label_covers_every_category() -> None:
    labels = {source: source_label(source) for source in LocationSource}

    assert labels[LocationSource.adsb] == "ADS-B Receiver"
    assert labels[LocationSource.geolocated] == "IP Geolocation"
    assert all(labels.values())
