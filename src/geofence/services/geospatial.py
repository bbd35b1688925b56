"""Geospatial helper functions."""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Optional

from pyproj import Geod
from shapely.geometry import LinearRing, Point, Polygon as ShapelyPolygon

from ..errors import DegenerateRingError, InvalidCoordinateError
from ..models.domain import GLOBAL_BOUNDS, BoundingBox, Coordinate, Polygon, Ring

EARTH_RADIUS_KM = 6371.0
SQUARE_METERS_PER_KM2 = 1_000_000
SQUARE_METERS_PER_ACRE = 4046.8564224

_GEOD = Geod(ellps="WGS84")


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def haversine_distance_km(a: Coordinate, b: Coordinate) -> float:
    return haversine_km(a.lat, a.lng, b.lat, b.lng)


def is_valid_coordinate(coordinate: Coordinate, bounds: Optional[BoundingBox] = None) -> bool:
    """Return True if the point is finite, on the globe and inside the deployment box."""

    lat, lng = coordinate.lat, coordinate.lng
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False
    if not GLOBAL_BOUNDS.contains(lat, lng):
        return False
    return bounds is None or bounds.contains(lat, lng)


def require_valid_coordinate(coordinate: Coordinate, bounds: Optional[BoundingBox] = None) -> Coordinate:
    if not is_valid_coordinate(coordinate, bounds):
        raise InvalidCoordinateError(coordinate.lat, coordinate.lng)
    return coordinate


def close_ring(points: Iterable[Coordinate]) -> Ring:
    """Close an ordered vertex list into a ring, appending the first point if needed.

    A trailing point equal to the first is treated as an existing closure, so
    closing an already closed ring returns the same ring. Fewer than three
    distinct vertices cannot bound an area and raise ``DegenerateRingError``.
    """

    vertices = list(points)
    if len(vertices) > 1 and vertices[0] == vertices[-1]:
        vertices = vertices[:-1]
    if len(set(vertices)) < 3:
        raise DegenerateRingError(
            f"A polygon needs at least 3 distinct points, got {len(set(vertices))}."
        )
    return Ring(tuple(vertices) + (vertices[0],))


@lru_cache(maxsize=2048)
def _ring_shape(ring: Ring) -> ShapelyPolygon:
    return ShapelyPolygon([(point.lng, point.lat) for point in ring.points])


def point_in_ring(point: Coordinate, ring: Ring) -> bool:
    """Even-odd containment test; points on an edge or vertex count as inside."""

    if not ring.is_complete:
        return False
    return _ring_shape(ring).covers(Point(point.lng, point.lat))


def point_in_polygon(point: Coordinate, polygon: Polygon) -> bool:
    outer = polygon.outer_ring
    if outer is None or not point_in_ring(point, outer):
        return False
    for hole in polygon.holes:
        if hole.is_complete and _ring_shape(hole).contains(Point(point.lng, point.lat)):
            return False
    return True


def _geodesic_area_perimeter(ring: Ring) -> tuple[float, float]:
    vertices = ring.vertices
    lons = [point.lng for point in vertices]
    lats = [point.lat for point in vertices]
    area, perimeter = _GEOD.polygon_area_perimeter(lons, lats)
    return abs(float(area)), float(perimeter)


def geodesic_area(ring: Ring) -> float:
    """Area in square meters on the WGS84 ellipsoid; 0 for fewer than 3 distinct vertices."""

    if ring.distinct_count < 3:
        return 0.0
    area, _ = _geodesic_area_perimeter(ring)
    return area


def geodesic_perimeter_km(ring: Ring) -> float:
    if ring.distinct_count < 2:
        return 0.0
    _, perimeter = _geodesic_area_perimeter(ring)
    return perimeter / 1000.0


def ring_centroid(ring: Ring) -> Coordinate:
    """Mean of the open vertices, used as the default delivery center."""

    vertices = ring.vertices
    return Coordinate(
        lat=sum(point.lat for point in vertices) / len(vertices),
        lng=sum(point.lng for point in vertices) / len(vertices),
    )


def ring_is_simple(ring: Ring) -> bool:
    """Return False for incomplete or self-intersecting rings."""

    if not ring.is_complete:
        return False
    return LinearRing([(point.lng, point.lat) for point in ring.points]).is_simple


def distance_to_segment_km(point: Coordinate, start: Coordinate, end: Coordinate) -> float:
    """Distance from a point to a segment on a local equirectangular projection."""

    scale = math.cos(math.radians(point.lat))

    def project(other: Coordinate) -> tuple[float, float]:
        x = math.radians(other.lng - point.lng) * scale * EARTH_RADIUS_KM
        y = math.radians(other.lat - point.lat) * EARTH_RADIUS_KM
        return x, y

    ax, ay = project(start)
    bx, by = project(end)
    dx, dy = bx - ax, by - ay
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(ax, ay)
    t = max(0.0, min(1.0, -(ax * dx + ay * dy) / length_sq))
    return math.hypot(ax + t * dx, ay + t * dy)


@dataclass(slots=True)
class PolygonStats:
    vertex_count: int
    area_m2: float
    area_km2: float
    area_acres: float
    perimeter_km: float
    is_simple: bool


def polygon_stats(ring: Ring) -> PolygonStats:
    area_m2 = geodesic_area(ring)
    return PolygonStats(
        vertex_count=len(ring.vertices) if len(ring) > 1 else 0,
        area_m2=area_m2,
        area_km2=round(area_m2 / SQUARE_METERS_PER_KM2, 2),
        area_acres=round(area_m2 / SQUARE_METERS_PER_ACRE, 2),
        perimeter_km=round(geodesic_perimeter_km(ring), 3),
        is_simple=ring_is_simple(ring),
    )
