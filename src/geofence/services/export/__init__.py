"""Export services."""

from .geojson import (
    area_from_document,
    area_to_document,
    areas_to_feature_collection,
    polygon_from_geojson,
    polygon_to_geojson,
    polygon_to_wkt,
)

__all__ = [
    "area_from_document",
    "area_to_document",
    "areas_to_feature_collection",
    "polygon_from_geojson",
    "polygon_to_geojson",
    "polygon_to_wkt",
]
