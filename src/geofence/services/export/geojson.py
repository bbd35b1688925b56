"""GeoJSON/WKT conversion for persisted areas and delivery zones.

Boundaries are stored in GeoJSON order: each vertex is ``[longitude, latitude]``
and every ring repeats its first vertex as the last. Both conventions are kept
exactly when reading and writing.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from ...models.domain import (
    Area,
    Coordinate,
    DeliveryZone,
    DistanceFee,
    FeeStructure,
    FlatFee,
    Polygon,
    Ring,
)


def generate_zone_color(index: int) -> str:
    """Generate distinct colors for zones."""
    colors = [
        "#02d8e0", "#e0003e", "#38e000", "#0000c1", "#e0e005",
        "#611cc7", "#e0af00", "#13aae0", "#a4d819", "#00e0bb",
    ]
    return colors[index % len(colors)]


def ring_to_coordinates(ring: Ring) -> List[List[float]]:
    return [point.as_lng_lat() for point in ring.points]


def ring_from_coordinates(coordinates: List[List[float]]) -> Ring:
    """Build a ring from ``[lng, lat]`` pairs; the pairs must already be closed."""

    points = tuple(Coordinate.from_lng_lat(pair) for pair in coordinates)
    return Ring(points)


def polygon_to_geojson(polygon: Polygon) -> Dict[str, Any]:
    return {
        "type": "Polygon",
        "coordinates": [ring_to_coordinates(ring) for ring in polygon.rings],
    }


def polygon_from_geojson(data: Optional[Dict[str, Any]]) -> Polygon:
    if not data:
        return Polygon()
    if data.get("type") != "Polygon":
        raise ValueError(f"Unsupported geometry type: {data.get('type')!r}")
    rings = tuple(ring_from_coordinates(ring) for ring in data.get("coordinates") or [] if ring)
    return Polygon(rings=rings)


def point_to_geojson(point: Coordinate) -> Dict[str, Any]:
    return {"type": "Point", "coordinates": point.as_lng_lat()}


def point_from_geojson(data: Dict[str, Any]) -> Coordinate:
    if data.get("type") != "Point":
        raise ValueError(f"Unsupported geometry type: {data.get('type')!r}")
    return Coordinate.from_lng_lat(data["coordinates"])


def polygon_to_wkt(polygon: Polygon) -> str:
    """Convert a polygon to WKT (``lon lat`` order, as WKT expects).

    Raises:
        ValueError: if the polygon has no complete outer ring.
    """
    if not polygon.has_boundary:
        raise ValueError("Polygon must have at least 3 coordinates")

    rings = []
    for ring in polygon.rings:
        coord_pairs = [f"{point.lng} {point.lat}" for point in ring.points]
        rings.append(f"({','.join(coord_pairs)})")
    return f"POLYGON({','.join(rings)})"


def fee_structure_to_document(structure: FeeStructure) -> Dict[str, Any]:
    if isinstance(structure, FlatFee):
        return {"type": "flat", "fee": structure.fee}
    return {
        "type": "distance",
        "baseFee": structure.base_fee,
        "perKmFee": structure.per_km_fee,
        "maxKm": structure.max_km,
    }


def fee_structure_from_document(data: Dict[str, Any]) -> FeeStructure:
    kind = data.get("type")
    if kind == "flat":
        return FlatFee(fee=float(data["fee"]))
    if kind == "distance":
        return DistanceFee(
            base_fee=float(data["baseFee"]),
            per_km_fee=float(data["perKmFee"]),
            max_km=float(data["maxKm"]),
        )
    raise ValueError(f"Unknown fee structure type: {kind!r}")


def zone_to_document(zone: DeliveryZone) -> Dict[str, Any]:
    return {
        "id": zone.id,
        "areaId": zone.area_id,
        "feeStructure": fee_structure_to_document(zone.fee_structure),
        "minOrderAmount": zone.min_order_amount,
        "estimatedTime": zone.estimated_time,
        "freeDeliveryAbove": zone.free_delivery_above,
        "isActive": zone.is_active,
    }


def zone_from_document(data: Dict[str, Any]) -> DeliveryZone:
    free_above = data.get("freeDeliveryAbove")
    return DeliveryZone(
        id=str(data["id"]),
        area_id=str(data["areaId"]),
        fee_structure=fee_structure_from_document(data["feeStructure"]),
        min_order_amount=float(data.get("minOrderAmount") or 0.0),
        estimated_time=str(data.get("estimatedTime") or "30-45 min"),
        free_delivery_above=float(free_above) if free_above is not None else None,
        is_active=bool(data.get("isActive", False)),
    )


def _timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def area_to_document(area: Area) -> Dict[str, Any]:
    return {
        "id": area.id,
        "name": area.name,
        "city": area.city,
        "center": point_to_geojson(area.center),
        "polygon": polygon_to_geojson(area.boundary),
        "isActive": area.is_active,
        "deliveryZone": zone_to_document(area.zone) if area.zone else None,
        "createdAt": _timestamp(area.created_at),
        "updatedAt": _timestamp(area.updated_at),
    }


def area_from_document(data: Dict[str, Any]) -> Area:
    zone_data = data.get("deliveryZone")
    return Area(
        id=str(data["id"]),
        name=str(data["name"]),
        city=str(data.get("city") or ""),
        center=point_from_geojson(data["center"]),
        boundary=polygon_from_geojson(data.get("polygon")),
        is_active=bool(data.get("isActive", True)),
        zone=zone_from_document(zone_data) if zone_data else None,
        created_at=_parse_timestamp(data.get("createdAt")),
        updated_at=_parse_timestamp(data.get("updatedAt")),
    )


def areas_to_feature_collection(areas: List[Area]) -> Dict[str, Any]:
    """Export areas as a GeoJSON FeatureCollection for map tooling."""

    features: List[Dict[str, Any]] = []
    for idx, area in enumerate(areas):
        if not area.boundary.rings:
            continue
        zone = area.zone
        features.append(
            {
                "type": "Feature",
                "id": area.id,
                "geometry": polygon_to_geojson(area.boundary),
                "properties": {
                    "name": area.name,
                    "city": area.city,
                    "center": area.center.as_lng_lat(),
                    "isActive": area.is_active,
                    "deliveryActive": bool(zone and zone.is_active),
                    "feeStructure": fee_structure_to_document(zone.fee_structure) if zone else None,
                    "fillColor": generate_zone_color(idx),
                },
            }
        )
    return {"type": "FeatureCollection", "features": features}
