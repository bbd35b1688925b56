"""Catalog loader with database-first approach, falling back to the JSON snapshot file."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Iterable

from ..config import settings
from ..models.domain import Area
from ..persistence.database import (
    delete_area_from_database,
    get_areas_from_database,
    save_areas_to_database,
)
from ..persistence.filesystem import FileStorage
from ..services.catalog import ZoneCatalog
from ..services.export.geojson import area_from_document, area_to_document

CATALOG_FORMAT_VERSION = 1

# Serializes catalog writes so the file and database always end on the newest snapshot
_persist_lock = threading.Lock()


def _load_areas_from_database() -> tuple[Area, ...] | None:
    """Load areas from Supabase. Returns None if database not available or empty."""
    try:
        areas = get_areas_from_database()
    except Exception as e:
        # If database query fails, return None to fall back to file
        logging.warning(f"Database query failed, falling back to catalog file: {e}")
        return None
    if not areas:
        return None
    return tuple(areas)


def _load_areas_from_file(source: Path | None = None) -> tuple[Area, ...]:
    catalog_path = source or settings.catalog_file
    if not catalog_path.exists():
        logging.info(f"Catalog file not found at {catalog_path}; starting with an empty catalog")
        return tuple()

    payload = FileStorage(root=catalog_path.parent).read_json(catalog_path)
    if not isinstance(payload, dict) or "areas" not in payload:
        raise ValueError(f"Catalog file '{catalog_path}' is missing the 'areas' list.")
    return tuple(area_from_document(document) for document in payload["areas"])


def load_catalog_areas(source: Path | None = None) -> tuple[Area, ...]:
    """Return persisted areas, preferring the database over the local file."""

    areas = _load_areas_from_database()
    if areas is not None:
        logging.info(f"Loaded {len(areas)} areas from database")
        return areas
    return _load_areas_from_file(source)


def persist_catalog(areas: Iterable[Area], destination: Path | None = None) -> Path:
    """Write the full catalog to the JSON snapshot file and mirror it to the database."""

    areas = tuple(areas)
    catalog_path = destination or settings.catalog_file
    FileStorage(root=catalog_path.parent).write_json(
        catalog_path,
        {"version": CATALOG_FORMAT_VERSION, "areas": [area_to_document(area) for area in areas]},
    )
    try:
        save_areas_to_database(areas)
    except Exception as e:
        logging.warning(f"Failed to save areas to database: {e}")
    return catalog_path


def persist_catalog_snapshot(catalog: ZoneCatalog, destination: Path | None = None) -> Path:
    """Persist the catalog's current snapshot.

    The snapshot is read only after the write lock is held, so concurrent callers
    write in publication order and the last write always carries the newest version.
    """

    with _persist_lock:
        snapshot = catalog.snapshot()
        path = persist_catalog(snapshot.areas(), destination)
    logging.info(f"Persisted catalog version {snapshot.version} ({len(snapshot)} areas) to {path}")
    return path


def delete_persisted_area(area_id: str) -> None:
    try:
        delete_area_from_database(area_id)
    except Exception as e:
        logging.warning(f"Failed to delete area {area_id} from database: {e}")
