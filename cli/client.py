from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the reconciler service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def group_devices(self, readings: List[Dict[str, Any]]) -> Dict[str, Any]:
        return self._post("/devices/group", {"readings": readings})

    def resolve_location(
        self,
        readings: List[Dict[str, Any]],
        client: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        return self._post("/locations/resolve", {"readings": readings, "client": client})

    def device_locations(self, readings: List[Dict[str, Any]]) -> Dict[str, Any]:
        return self._post("/locations/devices", {"readings": readings})

    def summary_metrics(self, sources: Dict[str, Any]) -> Dict[str, Any]:
        return self._post("/metrics/summary", sources)

    def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = self._client.post(path, json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.RequestError as exc:
            typer.secho(
                f"Could not reach {self._config.base_url}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1) from exc
        payload = response.json()
        if not isinstance(payload, dict):
            raise typer.BadParameter(f"Unexpected response payload from {path}.")
        return payload

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
