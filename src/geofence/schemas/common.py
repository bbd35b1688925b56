"""Shared geometry schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class LatLngModel(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)


class GeoJSONPolygonModel(BaseModel):
    """GeoJSON polygon; every vertex is ``[lng, lat]`` and rings repeat their first vertex."""

    type: Literal["Polygon"] = "Polygon"
    coordinates: list[list[tuple[float, float]]] = Field(default_factory=list)


class PolygonStatsModel(BaseModel):
    vertexCount: int
    areaM2: float
    areaKm2: float
    areaAcres: float
    perimeterKm: float
    isSimple: bool
