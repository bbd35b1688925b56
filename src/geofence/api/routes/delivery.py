"""Public serviceability endpoints used by checkout and address flows."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from ..dependencies import get_catalog, get_engine, to_http_exception
from ...errors import GeofenceError
from ...models.domain import Coordinate
from ...schemas.areas import PublicAreasResponse
from ...schemas.delivery import DeliveryCalculateRequest, DeliveryCheckResponse
from ...services.catalog import ZoneCatalog
from ...services.outputs.formatter import public_areas, result_to_response
from ...services.serviceability import ServiceabilityEngine

router = APIRouter(tags=["delivery"])


@router.get("/areas", response_model=PublicAreasResponse, status_code=status.HTTP_200_OK)
def list_active_areas(catalog: ZoneCatalog = Depends(get_catalog)) -> PublicAreasResponse:
    return PublicAreasResponse(areas=public_areas(catalog.snapshot()))


@router.get("/areas/check", response_model=DeliveryCheckResponse, status_code=status.HTTP_200_OK)
def check_area(
    lat: float = Query(..., description="Latitude of the delivery location"),
    lng: float = Query(..., description="Longitude of the delivery location"),
    engine: ServiceabilityEngine = Depends(get_engine),
) -> DeliveryCheckResponse:
    try:
        result = engine.check(Coordinate(lat=lat, lng=lng))
    except GeofenceError as exc:
        raise to_http_exception(exc) from exc
    return result_to_response(result)


@router.post("/delivery/calculate", response_model=DeliveryCheckResponse, status_code=status.HTTP_200_OK)
def calculate_delivery(
    payload: DeliveryCalculateRequest,
    engine: ServiceabilityEngine = Depends(get_engine),
) -> DeliveryCheckResponse:
    """Full verdict for a location, including fee and minimum-order checks for ``orderAmount``."""
    try:
        result = engine.check(Coordinate(lat=payload.lat, lng=payload.lng), payload.orderAmount)
    except GeofenceError as exc:
        raise to_http_exception(exc) from exc
    return result_to_response(result)
