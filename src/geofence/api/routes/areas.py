"""Admin API routes for delivery areas and their zones."""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from ..dependencies import get_catalog, to_http_exception
from ...data.catalog_repository import delete_persisted_area, persist_catalog_snapshot
from ...errors import GeofenceError
from ...models.domain import Area
from ...persistence.filesystem import FileStorage
from ...schemas.areas import (
    ActivePayload,
    AreaListResponse,
    AreaModel,
    CreateAreaPayload,
    DeliveryZonePayload,
    UpdateAreaPayload,
)
from ...services.catalog import ZoneCatalog
from ...services.export.geojson import areas_to_feature_collection
from ...services.geospatial import ring_centroid
from ...services.outputs.formatter import (
    area_to_model,
    latlng_from_model,
    polygon_from_model,
    zone_from_payload,
)

router = APIRouter(prefix="/admin", tags=["admin-areas"])


def _persist(request: Request, catalog: ZoneCatalog) -> None:
    persist_catalog_snapshot(catalog, request.app.state.catalog_file)


@router.get("/areas", response_model=AreaListResponse, status_code=status.HTTP_200_OK)
def list_areas(
    city: str | None = Query(default=None, description="Filter areas by city"),
    active: bool | None = Query(default=None, description="Filter areas by active flag"),
    catalog: ZoneCatalog = Depends(get_catalog),
) -> AreaListResponse:
    areas = [
        area
        for area in catalog.areas()
        if (city is None or area.city.lower() == city.lower())
        and (active is None or area.is_active == active)
    ]
    areas.sort(key=lambda area: (area.city, area.name))
    return AreaListResponse(areas=[area_to_model(area) for area in areas], total=len(areas))


@router.get("/areas/export", status_code=status.HTTP_200_OK)
def export_areas(request: Request, catalog: ZoneCatalog = Depends(get_catalog)) -> dict[str, Any]:
    """Export all area boundaries as a GeoJSON FeatureCollection and keep a copy on disk."""
    collection = areas_to_feature_collection(list(catalog.areas()))
    storage = FileStorage(root=request.app.state.data_root)
    run_dir = storage.make_run_directory(prefix="areas")
    storage.write_json(run_dir / "areas.geojson", collection)
    logging.info(f"Exported {len(collection['features'])} area boundaries to {run_dir}")
    return collection


@router.get("/areas/{area_id}", response_model=AreaModel, status_code=status.HTTP_200_OK)
def get_area(area_id: str, catalog: ZoneCatalog = Depends(get_catalog)) -> AreaModel:
    try:
        return area_to_model(catalog.get_area(area_id))
    except GeofenceError as exc:
        raise to_http_exception(exc) from exc


@router.post("/areas", response_model=AreaModel, status_code=status.HTTP_201_CREATED)
def create_area(
    payload: CreateAreaPayload,
    request: Request,
    catalog: ZoneCatalog = Depends(get_catalog),
) -> AreaModel:
    try:
        boundary = polygon_from_model(payload.polygon)
        if payload.center is not None:
            center = latlng_from_model(payload.center)
        elif boundary.outer_ring is not None:
            center = ring_centroid(boundary.outer_ring)
        else:
            raise ValueError("Either a center or a polygon is required to create an area.")

        area_id = uuid.uuid4().hex
        zone = (
            zone_from_payload(payload.deliveryZone, zone_id=uuid.uuid4().hex, area_id=area_id)
            if payload.deliveryZone
            else None
        )
        area = catalog.upsert_area(
            Area(
                id=area_id,
                name=payload.name.strip(),
                city=payload.city.strip(),
                center=center,
                boundary=boundary,
                is_active=payload.isActive,
                zone=zone,
            )
        )
    except GeofenceError as exc:
        raise to_http_exception(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    _persist(request, catalog)
    return area_to_model(area)


@router.put("/areas/{area_id}", response_model=AreaModel, status_code=status.HTTP_200_OK)
def update_area(
    area_id: str,
    payload: UpdateAreaPayload,
    request: Request,
    catalog: ZoneCatalog = Depends(get_catalog),
) -> AreaModel:
    try:
        existing = catalog.get_area(area_id)
        changes: dict[str, Any] = {}
        if payload.name is not None:
            changes["name"] = payload.name.strip()
        if payload.city is not None:
            changes["city"] = payload.city.strip()
        if payload.center is not None:
            changes["center"] = latlng_from_model(payload.center)
        if payload.polygon is not None:
            changes["boundary"] = polygon_from_model(payload.polygon)
        area = catalog.upsert_area(replace(existing, **changes))
    except GeofenceError as exc:
        raise to_http_exception(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    _persist(request, catalog)
    return area_to_model(area)


@router.delete("/areas/{area_id}", status_code=status.HTTP_200_OK)
def delete_area(area_id: str, request: Request, catalog: ZoneCatalog = Depends(get_catalog)) -> dict[str, Any]:
    try:
        removed = catalog.remove_area(area_id)
    except GeofenceError as exc:
        raise to_http_exception(exc) from exc

    delete_persisted_area(area_id)
    _persist(request, catalog)
    return {"deleted": removed.id, "name": removed.name}


@router.patch("/areas/{area_id}/active", response_model=AreaModel, status_code=status.HTTP_200_OK)
def set_area_active(
    area_id: str,
    payload: ActivePayload,
    request: Request,
    catalog: ZoneCatalog = Depends(get_catalog),
) -> AreaModel:
    try:
        area = catalog.set_area_active(area_id, payload.isActive)
    except GeofenceError as exc:
        raise to_http_exception(exc) from exc

    _persist(request, catalog)
    return area_to_model(area)


@router.put("/delivery-zones/{area_id}", response_model=AreaModel, status_code=status.HTTP_200_OK)
def configure_delivery_zone(
    area_id: str,
    payload: DeliveryZonePayload,
    request: Request,
    catalog: ZoneCatalog = Depends(get_catalog),
) -> AreaModel:
    """Create or replace the fee structure and terms of an area's delivery zone."""
    try:
        existing = catalog.get_area(area_id)
        zone_id = existing.zone.id if existing.zone else uuid.uuid4().hex
        area = catalog.set_zone(area_id, zone_from_payload(payload, zone_id=zone_id, area_id=area_id))
    except GeofenceError as exc:
        raise to_http_exception(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    _persist(request, catalog)
    return area_to_model(area)


@router.patch("/delivery-zones/{area_id}/active", response_model=AreaModel, status_code=status.HTTP_200_OK)
def set_delivery_zone_active(
    area_id: str,
    payload: ActivePayload,
    request: Request,
    catalog: ZoneCatalog = Depends(get_catalog),
) -> AreaModel:
    try:
        area = catalog.set_zone_active(area_id, payload.isActive)
    except GeofenceError as exc:
        raise to_http_exception(exc) from exc

    _persist(request, catalog)
    return area_to_model(area)
