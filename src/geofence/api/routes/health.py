"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ..dependencies import get_catalog
from ...services.catalog import ZoneCatalog

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root(catalog: ZoneCatalog = Depends(get_catalog)) -> dict:
    """Simple health check endpoint that doesn't require any external dependencies."""
    snapshot = catalog.snapshot()
    return {
        "status": "ok",
        "areas": len(snapshot),
        "active_zones": sum(1 for _ in snapshot.active_zones()),
        "catalog_version": snapshot.version,
    }


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Check database connection and area storage status."""
    from ...db.supabase import get_supabase_client
    from ...persistence.database import get_areas_from_database

    supabase = get_supabase_client()
    if not supabase:
        return {
            "configured": False,
            "message": "Supabase not configured. Set GEOFENCE_SUPABASE_URL and GEOFENCE_SUPABASE_KEY environment variables.",
            "areas_count": 0,
        }

    try:
        areas = get_areas_from_database() or []
        return {
            "configured": True,
            "connected": True,
            "areas_count": len(areas),
            "message": f"Database connected. Found {len(areas)} areas in database.",
        }
    except Exception as exc:
        return {
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }
