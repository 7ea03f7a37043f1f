"""HTTP route definitions for the service."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from app.schemas import (
    ClientsLocationsRequest,
    ClientsLocationsResponse,
    CoordinatesOut,
    DeviceGroupOut,
    DeviceLocationsResponse,
    GroupResponse,
    ReadingsRequest,
    ResolvedLocationOut,
    ResolveRequest,
    StatsSourcesIn,
    SummaryMetricsOut,
)
from services.measurements import calculate_map_center
from services.reconciler import ReconciliationService, build_default_service

router = APIRouter()


def get_service() -> ReconciliationService:
    return build_default_service()


@router.post(
    "/devices/group",
    response_model=GroupResponse,
    summary="Fold raw readings into per-device aggregates.",
    description=(
        "Only the most recent RECONCILER_READING_WINDOW readings (default 5000, "
        "0 disables the limit) are grouped; older ones are dropped before grouping."
    ),
)
async def group_devices(
    request: ReadingsRequest,
    service: ReconciliationService = Depends(get_service),
) -> GroupResponse:
    groups = service.group_readings(request.readings)
    return GroupResponse(
        devices=[DeviceGroupOut.from_domain(group) for group in groups],
        map_center=CoordinatesOut.from_domain(calculate_map_center(groups)),
    )


@router.post(
    "/locations/resolve",
    response_model=ResolvedLocationOut,
    response_model_exclude_none=True,
    summary="Resolve the single best location for one client.",
)
async def resolve_location(
    request: ResolveRequest,
    service: ReconciliationService = Depends(get_service),
) -> ResolvedLocationOut:
    resolved = service.resolve_client(request.client_info(), request.readings)
    return ResolvedLocationOut.from_domain(resolved)


@router.post(
    "/locations/devices",
    response_model=DeviceLocationsResponse,
    response_model_exclude_none=True,
    summary="List every device-derived location candidate.",
)
async def device_locations(
    request: ReadingsRequest,
    service: ReconciliationService = Depends(get_service),
) -> DeviceLocationsResponse:
    locations = service.device_locations(request.readings)
    return DeviceLocationsResponse(
        locations=[ResolvedLocationOut.from_domain(location) for location in locations]
    )


@router.post(
    "/clients/locations",
    response_model=ClientsLocationsResponse,
    response_model_exclude_none=True,
    summary="Resolve one location per client from a shared reading set.",
)
async def client_locations(
    request: ClientsLocationsRequest,
    service: ReconciliationService = Depends(get_service),
) -> ClientsLocationsResponse:
    try:
        resolved = service.resolve_clients(request.client_infos(), request.readings)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return ClientsLocationsResponse(
        locations={
            client_id: ResolvedLocationOut.from_domain(location)
            for client_id, location in resolved.items()
        }
    )


@router.post(
    "/metrics/summary",
    response_model=SummaryMetricsOut,
    summary="Coalesce overlapping statistics responses into summary metrics.",
)
async def summary_metrics(
    sources: StatsSourcesIn,
    service: ReconciliationService = Depends(get_service),
) -> SummaryMetricsOut:
    return SummaryMetricsOut.from_domain(service.summarize(sources.to_domain()))


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
