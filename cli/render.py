from __future__ import annotations

from typing import Any, Dict, Iterable

import typer

_LOCATION_FIELDS = (
    "source",
    "latitude",
    "longitude",
    "altitude",
    "accuracy",
    "city",
    "country",
    "deviceId",
    "timestamp",
)


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _location_pairs(payload: Dict[str, Any]) -> list[tuple[str, Any]]:
    return [(key, payload[key]) for key in _LOCATION_FIELDS if payload.get(key) is not None]


def render_groups(payload: Dict[str, Any]) -> None:
    devices = payload.get("devices") or []
    echo_heading(f"Devices ({len(devices)})")
    if not devices:
        typer.echo("No devices found.")
    for device in devices:
        latest = device.get("latest") or {}
        location = device.get("location")
        typer.echo(
            f"  - {device.get('client_id')}/{device.get('device_type')}"
            f" [{device.get('device_id')}] readings={device.get('reading_count')}"
            f" latest={latest.get('timestamp')}"
        )
        if location:
            typer.echo(f"      location: {location.get('lat')}, {location.get('lng')}")

    center = payload.get("map_center") or {}
    typer.echo()
    echo_key_values([("map_center", f"{center.get('lat')}, {center.get('lng')}")])


def render_location(payload: Dict[str, Any]) -> None:
    echo_heading("Resolved Location")
    if payload.get("latitude") is None or payload.get("longitude") is None:
        typer.echo(f"source: {payload.get('source', 'unknown')}")
        typer.echo("No location available.")
        return
    echo_key_values(_location_pairs(payload))


def render_device_locations(payload: Dict[str, Any]) -> None:
    locations = payload.get("locations") or []
    echo_heading(f"Device Locations ({len(locations)})")
    if not locations:
        typer.echo("No device reported coordinates.")
        return
    for location in locations:
        typer.echo(
            f"  - {location.get('deviceId')} ({location.get('source')}):"
            f" {location.get('latitude')}, {location.get('longitude')}"
        )


def render_summary(payload: Dict[str, Any]) -> None:
    echo_heading("Summary Metrics")
    echo_key_values(
        (key, "—" if value is None else value)
        for key, value in payload.items()
        if key != "time_ranges"
    )
