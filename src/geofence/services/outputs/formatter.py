"""Utilities to convert domain objects and verdicts into API schemas."""

from __future__ import annotations

from typing import Optional

from ...models.domain import Area, Coordinate, DeliveryZone, DistanceFee, FeeStructure, FlatFee, Polygon, Ring
from ...schemas.areas import (
    AreaModel,
    DeliveryZoneModel,
    DeliveryZonePayload,
    DistanceFeeModel,
    FlatFeeModel,
    PublicAreaModel,
    PublicZoneSummary,
)
from ...schemas.common import GeoJSONPolygonModel, LatLngModel, PolygonStatsModel
from ...schemas.delivery import AreaRefModel, DeliveryCheckResponse
from ..catalog import CatalogSnapshot
from ..export.geojson import polygon_to_geojson
from ..geospatial import close_ring, polygon_stats
from ..serviceability import InService, NotInService, OutOfRange, ServiceabilityResult


def latlng_to_model(point: Coordinate) -> LatLngModel:
    return LatLngModel(lat=point.lat, lng=point.lng)


def latlng_from_model(model: LatLngModel) -> Coordinate:
    return Coordinate(lat=model.lat, lng=model.lng)


def polygon_to_model(polygon: Polygon) -> GeoJSONPolygonModel:
    return GeoJSONPolygonModel(**polygon_to_geojson(polygon))


def polygon_from_model(model: Optional[GeoJSONPolygonModel]) -> Polygon:
    """Build a boundary from ``[lng, lat]`` rings, closing any ring left open."""

    if model is None:
        return Polygon()
    rings = tuple(
        close_ring(Coordinate(lat=lat, lng=lng) for lng, lat in ring)
        for ring in model.coordinates
        if ring
    )
    return Polygon(rings=rings)


def ring_from_model(model: Optional[GeoJSONPolygonModel]) -> Optional[Ring]:
    """Outer ring as sent by an editor client; may be incomplete but must be closed."""

    if model is None or not model.coordinates or not model.coordinates[0]:
        return None
    points = [Coordinate(lat=lat, lng=lng) for lng, lat in model.coordinates[0]]
    if points[0] != points[-1]:
        points.append(points[0])
    return Ring(tuple(points))


def stats_to_model(ring: Ring) -> PolygonStatsModel:
    stats = polygon_stats(ring)
    return PolygonStatsModel(
        vertexCount=stats.vertex_count,
        areaM2=stats.area_m2,
        areaKm2=stats.area_km2,
        areaAcres=stats.area_acres,
        perimeterKm=stats.perimeter_km,
        isSimple=stats.is_simple,
    )


def fee_structure_to_model(structure: FeeStructure) -> FlatFeeModel | DistanceFeeModel:
    if isinstance(structure, FlatFee):
        return FlatFeeModel(fee=structure.fee)
    return DistanceFeeModel(baseFee=structure.base_fee, perKmFee=structure.per_km_fee, maxKm=structure.max_km)


def fee_structure_from_model(model: FlatFeeModel | DistanceFeeModel) -> FeeStructure:
    if isinstance(model, FlatFeeModel):
        return FlatFee(fee=model.fee)
    return DistanceFee(base_fee=model.baseFee, per_km_fee=model.perKmFee, max_km=model.maxKm)


def zone_from_payload(payload: DeliveryZonePayload, *, zone_id: str, area_id: str) -> DeliveryZone:
    return DeliveryZone(
        id=zone_id,
        area_id=area_id,
        fee_structure=fee_structure_from_model(payload.feeStructure),
        min_order_amount=payload.minOrderAmount,
        estimated_time=payload.estimatedTime,
        free_delivery_above=payload.freeDeliveryAbove,
        is_active=payload.isActive,
    )


def zone_to_model(zone: DeliveryZone) -> DeliveryZoneModel:
    return DeliveryZoneModel(
        id=zone.id,
        areaId=zone.area_id,
        feeStructure=fee_structure_to_model(zone.fee_structure),
        minOrderAmount=zone.min_order_amount,
        estimatedTime=zone.estimated_time,
        freeDeliveryAbove=zone.free_delivery_above,
        isActive=zone.is_active,
    )


def area_to_model(area: Area) -> AreaModel:
    outer = area.boundary.outer_ring
    return AreaModel(
        id=area.id,
        name=area.name,
        city=area.city,
        center=latlng_to_model(area.center),
        polygon=polygon_to_model(area.boundary),
        isActive=area.is_active,
        deliveryZone=zone_to_model(area.zone) if area.zone else None,
        stats=stats_to_model(outer) if outer is not None else None,
        createdAt=area.created_at,
        updatedAt=area.updated_at,
    )


def public_areas(snapshot: CatalogSnapshot) -> list[PublicAreaModel]:
    """Active areas for customer-facing pickers; zone details only when delivery is live."""

    items: list[PublicAreaModel] = []
    for area in snapshot.areas():
        if not area.is_active:
            continue
        zone = area.zone if area.zone and area.zone.is_active else None
        items.append(
            PublicAreaModel(
                id=area.id,
                name=area.name,
                city=area.city,
                center=latlng_to_model(area.center),
                deliveryZone=PublicZoneSummary(
                    feeStructure=fee_structure_to_model(zone.fee_structure),
                    minOrderAmount=zone.min_order_amount,
                    estimatedTime=zone.estimated_time,
                    freeDeliveryAbove=zone.free_delivery_above,
                )
                if zone
                else None,
                hasDeliveryZone=zone is not None,
            )
        )
    return items


def result_to_response(result: ServiceabilityResult) -> DeliveryCheckResponse:
    if isinstance(result, InService):
        return DeliveryCheckResponse(
            inService=True,
            deliverable=result.meets_minimum_order is not False,
            reason="in_service",
            message=(
                f"Delivery available in {result.area_name}."
                if result.meets_minimum_order is not False
                else f"Minimum order for {result.area_name} is {result.min_order_amount:g}."
            ),
            area=AreaRefModel(id=result.area_id, name=result.area_name, city=result.city),
            zoneId=result.zone_id,
            deliveryFee=result.fee,
            minOrderAmount=result.min_order_amount,
            estimatedTime=result.estimated_time,
            freeDeliveryAbove=result.free_delivery_above,
            distanceKm=round(result.distance_km, 2),
            meetsMinimumOrder=result.meets_minimum_order,
        )
    if isinstance(result, OutOfRange):
        return DeliveryCheckResponse(
            inService=False,
            deliverable=False,
            reason="out_of_range",
            message=result.message,
            area=AreaRefModel(id=result.area_id, name=result.area_name, city=result.city),
            zoneId=result.zone_id,
            distanceKm=round(result.distance_km, 2),
            maxDistanceKm=result.max_km,
        )
    if isinstance(result, NotInService):
        return DeliveryCheckResponse(
            inService=False,
            deliverable=False,
            reason="not_in_service",
            message=result.message,
        )
    raise TypeError(f"Unsupported serviceability result: {type(result).__name__}")
