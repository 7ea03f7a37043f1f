"""Service facade wiring grouping and resolution for the HTTP layer."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, Iterable, List, Optional, Sequence

from models.records import ClientInfo, DeviceGroup, ResolvedLocation
from services.coalesce import StatsSources, SummaryMetrics, summarize
from services.grouping import DeviceGrouper, ReadingLike, window_readings
from services.resolver import LocationResolver
from settings import get_settings

logger = logging.getLogger(__name__)


class ReconciliationService:
    """Coordinates windowing, grouping, and location resolution."""

    def __init__(
        self,
        grouper: DeviceGrouper,
        resolver: LocationResolver,
        reading_window: int = 0,
    ) -> None:
        self.grouper = grouper
        self.resolver = resolver
        self.reading_window = reading_window

    def group_readings(self, readings: Sequence[ReadingLike]) -> List[DeviceGroup]:
        """Group the most recent window of ``readings`` into devices."""
        windowed = window_readings(readings, self.reading_window)
        if len(windowed) < len(readings):
            logger.warning(
                "Reading window applied; older readings dropped",
                extra={
                    "reading_count": len(readings),
                    "reason": f"kept last {len(windowed)}",
                },
            )
        return self.grouper.group(windowed)

    def resolve_client(
        self,
        client: Optional[ClientInfo],
        readings: Sequence[ReadingLike],
    ) -> ResolvedLocation:
        return self.resolver.resolve(client, self.group_readings(readings))

    def device_locations(self, readings: Sequence[ReadingLike]) -> List[ResolvedLocation]:
        return self.resolver.device_locations(self.group_readings(readings))

    def resolve_clients(
        self,
        clients: Iterable[ClientInfo],
        readings: Sequence[ReadingLike],
    ) -> Dict[str, ResolvedLocation]:
        """Resolve every client against only the devices it reported."""
        registry: Dict[str, ClientInfo] = {}
        for client in clients:
            if client.client_id in registry:
                raise ValueError(f"Duplicate client_id {client.client_id!r} in request.")
            registry[client.client_id] = client

        by_client: Dict[str, List[DeviceGroup]] = {client_id: [] for client_id in registry}
        for group in self.group_readings(readings):
            if group.client_id in by_client:
                by_client[group.client_id].append(group)

        return {
            client_id: self.resolver.resolve(client, by_client[client_id])
            for client_id, client in registry.items()
        }

    def summarize(self, sources: StatsSources) -> SummaryMetrics:
        return summarize(sources)


@lru_cache
def build_default_service() -> ReconciliationService:
    """Factory that wires the service from settings."""
    settings = get_settings()
    return ReconciliationService(
        grouper=DeviceGrouper(),
        resolver=LocationResolver(),
        reading_window=settings.reading_window,
    )
