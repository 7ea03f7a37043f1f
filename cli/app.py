from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_device_locations, render_groups, render_location, render_summary


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for reconciling sensor readings through the reconciler service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise typer.BadParameter(f"Could not read JSON from {path}: {exc}") from exc


def _load_readings(path: Path) -> List[Dict[str, Any]]:
    """Accept either a bare list of readings or an object with a ``readings`` key."""
    payload = _load_json(path)
    if isinstance(payload, dict):
        payload = payload.get("readings")
    if not isinstance(payload, list):
        raise typer.BadParameter(f"{path} does not contain a list of readings.")
    return [reading for reading in payload if isinstance(reading, dict)]


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Reconciler API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("group")
def group_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="JSON file of readings."),
) -> None:
    """Group readings into per-device aggregates."""
    state = _get_state(ctx)
    payload = state.client.group_devices(_load_readings(file))
    render_groups(payload)


@app.command("resolve")
def resolve_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="JSON file of readings."),
    client_file: Optional[Path] = typer.Option(
        None,
        "--client",
        "-c",
        exists=True,
        dir_okay=False,
        readable=True,
        help="JSON file describing the client (used for the IP-geolocation fallback).",
    ),
) -> None:
    """Resolve the best location for one client."""
    state = _get_state(ctx)
    client: Optional[Dict[str, Any]] = None
    if client_file is not None:
        client = _load_json(client_file)
        if not isinstance(client, dict):
            raise typer.BadParameter(f"{client_file} does not contain a client object.")
    payload = state.client.resolve_location(_load_readings(file), client=client)
    render_location(payload)


@app.command("locations")
def locations_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="JSON file of readings."),
) -> None:
    """List every location reported by a device."""
    state = _get_state(ctx)
    payload = state.client.device_locations(_load_readings(file))
    render_device_locations(payload)


@app.command("summary")
def summary_command(
    ctx: typer.Context,
    file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="JSON object of statistics responses."
    ),
) -> None:
    """Coalesce statistics responses into dashboard summary metrics."""
    state = _get_state(ctx)
    sources = _load_json(file)
    if not isinstance(sources, dict):
        raise typer.BadParameter(f"{file} does not contain a statistics object.")
    payload = state.client.summary_metrics(sources)
    render_summary(payload)
