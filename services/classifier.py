"""Map free-form device type strings onto location source categories."""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from models.records import LocationSource

# Checked top to bottom; the first keyword found in the lowered type wins.
CATEGORY_KEYWORDS: Tuple[Tuple[str, LocationSource], ...] = (
    ("starlink", LocationSource.starlink),
    ("gps", LocationSource.gps),
    ("gnss", LocationSource.gps),
    ("lora", LocationSource.lora),
    ("arduino", LocationSource.arduino),
    ("adsb", LocationSource.adsb),
    ("aircraft", LocationSource.adsb),
    ("thermal", LocationSource.thermal),
    ("probe", LocationSource.thermal),
    ("system", LocationSource.system),
    ("monitor", LocationSource.system),
    ("wifi", LocationSource.wifi),
    ("bluetooth", LocationSource.bluetooth),
    ("ble", LocationSource.bluetooth),
)

FALLBACK_CATEGORY = LocationSource.geolocated

SOURCE_LABELS: Dict[LocationSource, str] = {
    LocationSource.starlink: "Starlink",
    LocationSource.gps: "GPS",
    LocationSource.lora: "LoRa",
    LocationSource.arduino: "Arduino GPS",
    LocationSource.adsb: "ADS-B Receiver",
    LocationSource.thermal: "Thermal Probe",
    LocationSource.system: "System",
    LocationSource.wifi: "WiFi",
    LocationSource.bluetooth: "Bluetooth",
    LocationSource.geolocated: "IP Geolocation",
    LocationSource.unknown: "Unknown",
}


def classify(device_type: Optional[str]) -> LocationSource:
    """Return the category for ``device_type``; never raises."""

    lowered = device_type.lower() if isinstance(device_type, str) else ""
    for keyword, category in CATEGORY_KEYWORDS:
        if keyword in lowered:
            return category
    return FALLBACK_CATEGORY


def source_label(source: LocationSource) -> str:
    return SOURCE_LABELS.get(source, SOURCE_LABELS[LocationSource.unknown])
