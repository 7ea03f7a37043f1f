"""Pick one best-guess location per client from its devices' claims."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from models.records import (
    ClientInfo,
    Coordinates,
    DeviceGroup,
    LocationSource,
    ResolvedLocation,
    as_text,
)
from services.classifier import classify
from services.extractors import extract

logger = logging.getLogger(__name__)

# Lower wins. ADS-B extraction describes the receiver station and is easily
# confused with aircraft positions, so it ranks below IP geolocation.
SOURCE_PRIORITY: Dict[LocationSource, int] = {
    LocationSource.starlink: 1,
    LocationSource.gps: 2,
    LocationSource.lora: 3,
    LocationSource.arduino: 4,
    LocationSource.thermal: 5,
    LocationSource.system: 6,
    LocationSource.wifi: 7,
    LocationSource.bluetooth: 8,
    LocationSource.geolocated: 9,
    LocationSource.adsb: 99,
    LocationSource.unknown: 100,
}


def priority_of(source: LocationSource) -> int:
    return SOURCE_PRIORITY.get(source, SOURCE_PRIORITY[LocationSource.unknown])


def device_candidate(device: DeviceGroup) -> Optional[ResolvedLocation]:
    """Build the location candidate a single device contributes, if any."""

    category = classify(device.device_type)
    latest = device.latest
    data = latest.data if latest is not None and isinstance(latest.data, Mapping) else {}
    timestamp = latest.timestamp if latest is not None else None

    if device.location is not None:
        return ResolvedLocation(
            source=category,
            latitude=device.location.lat,
            longitude=device.location.lng,
            city=as_text(data.get("city")),
            country=as_text(data.get("country")),
            device_id=device.device_id,
            timestamp=timestamp,
        )

    found = extract(category, data)
    if found is None:
        return None
    return ResolvedLocation(
        source=category,
        latitude=found.lat,
        longitude=found.lng,
        altitude=found.altitude,
        accuracy=found.accuracy,
        city=found.city,
        country=found.country,
        device_id=device.device_id,
        timestamp=timestamp,
    )


def client_fallback(client: Optional[ClientInfo]) -> Optional[ResolvedLocation]:
    location = client.location if client is not None else None
    if location is None or location.latitude is None or location.longitude is None:
        return None
    return ResolvedLocation(
        source=LocationSource.geolocated,
        latitude=location.latitude,
        longitude=location.longitude,
        city=location.city,
        country=location.country,
    )


class LocationResolver:

    def device_locations(self, devices: Iterable[DeviceGroup]) -> List[ResolvedLocation]:
        """Every device-derived candidate, in device order."""
        candidates: List[ResolvedLocation] = []
        for device in devices:
            candidate = device_candidate(device)
            if candidate is not None and candidate.has_coordinates:
                candidates.append(candidate)
        return candidates

    def resolve(
        self,
        client: Optional[ClientInfo],
        devices: Optional[Sequence[DeviceGroup]] = (),
    ) -> ResolvedLocation:
        candidates = self.device_locations(devices or ())
        # The IP fallback ranks as geolocated, after any device of equal rank,
        # so it only displaces the deliberately demoted sources.
        fallback = client_fallback(client)
        ranked = list(candidates)
        if fallback is not None:
            ranked.append(fallback)
        # list.sort is stable, so equal priorities keep device order.
        ranked.sort(key=lambda candidate: priority_of(candidate.source))

        best = ranked[0] if ranked else ResolvedLocation(source=LocationSource.unknown)

        logger.debug(
            "Resolved client location",
            extra={
                "client_id": client.client_id if client is not None else None,
                "source": best.source.value,
                "device_id": best.device_id,
                "candidate_count": len(candidates),
            },
        )
        return best

    def enrich(self, devices: Iterable[DeviceGroup]) -> List[DeviceGroup]:
        """Return groups with ``location`` filled in where it can be extracted."""
        enriched: List[DeviceGroup] = []
        for device in devices:
            if device.location is not None:
                enriched.append(device)
                continue
            data = device.latest.data if device.latest is not None else None
            found = extract(classify(device.device_type), data)
            if found is None:
                enriched.append(device)
                continue
            enriched.append(
                replace(
                    device,
                    readings=list(device.readings),
                    location=Coordinates(lat=found.lat, lng=found.lng),
                )
            )
        return enriched
