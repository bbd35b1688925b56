"""Database persistence for areas and delivery zones."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from ..db.supabase import AREAS_TABLE, DELIVERY_ZONES_TABLE, get_supabase_client
from ..models.domain import Area
from ..services.export.geojson import (
    area_from_document,
    fee_structure_to_document,
    point_to_geojson,
    polygon_to_geojson,
    polygon_to_wkt,
)


def _area_row(area: Area) -> dict[str, Any]:
    return {
        "id": area.id,
        "name": area.name,
        "city": area.city,
        "center": point_to_geojson(area.center),
        "polygon": polygon_to_geojson(area.boundary),
        "geometry_wkt": polygon_to_wkt(area.boundary) if area.boundary.has_boundary else None,
        "is_active": area.is_active,
        "created_at": area.created_at.isoformat() if area.created_at else None,
        "updated_at": area.updated_at.isoformat() if area.updated_at else None,
    }


def _zone_row(area: Area) -> dict[str, Any] | None:
    zone = area.zone
    if zone is None:
        return None
    return {
        "id": zone.id,
        "area_id": zone.area_id,
        "fee_structure": fee_structure_to_document(zone.fee_structure),
        "min_order_amount": zone.min_order_amount,
        "estimated_time": zone.estimated_time,
        "free_delivery_above": zone.free_delivery_above,
        "is_active": zone.is_active,
    }


def _row_to_document(row: dict[str, Any], zone_row: dict[str, Any] | None) -> dict[str, Any]:
    zone_document = None
    if zone_row:
        zone_document = {
            "id": zone_row["id"],
            "areaId": zone_row["area_id"],
            "feeStructure": zone_row["fee_structure"],
            "minOrderAmount": zone_row.get("min_order_amount"),
            "estimatedTime": zone_row.get("estimated_time"),
            "freeDeliveryAbove": zone_row.get("free_delivery_above"),
            "isActive": zone_row.get("is_active", False),
        }
    return {
        "id": row["id"],
        "name": row["name"],
        "city": row.get("city"),
        "center": row["center"],
        "polygon": row.get("polygon"),
        "isActive": row.get("is_active", True),
        "deliveryZone": zone_document,
        "createdAt": row.get("created_at"),
        "updatedAt": row.get("updated_at"),
    }


def get_areas_from_database() -> list[Area] | None:
    """Load all areas with their zones. Returns None if the database is not configured."""

    supabase = get_supabase_client()
    if not supabase:
        return None

    area_rows = supabase.table(AREAS_TABLE).select("*").execute().data or []
    zone_rows = supabase.table(DELIVERY_ZONES_TABLE).select("*").execute().data or []
    zones_by_area = {row["area_id"]: row for row in zone_rows}

    areas: list[Area] = []
    for row in area_rows:
        try:
            areas.append(area_from_document(_row_to_document(row, zones_by_area.get(row["id"]))))
        except (KeyError, ValueError, TypeError) as e:
            # Skip invalid rows but continue processing
            logging.warning(f"Skipping invalid area row {row.get('id')}: {e}")
    return areas


def save_areas_to_database(areas: Iterable[Area]) -> bool:
    """Upsert areas and their zones. Returns False when the database is not configured."""

    supabase = get_supabase_client()
    if not supabase:
        logging.info("Supabase not configured - areas will only be saved to files")
        return False

    areas = list(areas)
    area_rows = [_area_row(area) for area in areas]
    zone_rows = [row for row in (_zone_row(area) for area in areas) if row]

    if area_rows:
        supabase.table(AREAS_TABLE).upsert(area_rows).execute()
    if zone_rows:
        supabase.table(DELIVERY_ZONES_TABLE).upsert(zone_rows).execute()

    # Zones removed from an area are not covered by the upsert
    zoneless = [area.id for area in areas if area.zone is None]
    if zoneless:
        supabase.table(DELIVERY_ZONES_TABLE).delete().in_("area_id", zoneless).execute()

    logging.info(f"Saved {len(area_rows)} areas and {len(zone_rows)} delivery zones to database")
    return True


def delete_area_from_database(area_id: str) -> bool:
    supabase = get_supabase_client()
    if not supabase:
        return False

    supabase.table(DELIVERY_ZONES_TABLE).delete().eq("area_id", area_id).execute()
    supabase.table(AREAS_TABLE).delete().eq("id", area_id).execute()
    logging.info(f"Deleted area {area_id} from database")
    return True
