import math

import pytest
from pyproj import Geod

from geofence.errors import DegenerateRingError, InvalidCoordinateError
from geofence.models.domain import BoundingBox, Coordinate, Polygon, Ring
from geofence.services.geospatial import (
    close_ring,
    distance_to_segment_km,
    geodesic_area,
    geodesic_perimeter_km,
    haversine_distance_km,
    is_valid_coordinate,
    point_in_polygon,
    point_in_ring,
    polygon_stats,
    require_valid_coordinate,
    ring_centroid,
    ring_is_simple,
)

PAKISTAN = BoundingBox(min_lat=23.5, max_lat=37.5, min_lng=60.0, max_lng=78.0)


def _c(lat: float, lng: float) -> Coordinate:
    return Coordinate(lat=lat, lng=lng)


def _rotate(ring: Ring, shift: int) -> Ring:
    vertices = list(ring.vertices)
    rotated = vertices[shift:] + vertices[:shift]
    return close_ring(rotated)


DHA8 = close_ring([_c(31.50, 74.35), _c(31.51, 74.35), _c(31.51, 74.36), _c(31.50, 74.36)])

# L-shaped (concave) boundary
L_SHAPE = close_ring(
    [
        _c(31.50, 74.30),
        _c(31.54, 74.30),
        _c(31.54, 74.32),
        _c(31.52, 74.32),
        _c(31.52, 74.34),
        _c(31.50, 74.34),
    ]
)


def test_close_ring_appends_first_point():
    ring = close_ring([_c(31.5, 74.3), _c(31.6, 74.3), _c(31.6, 74.4)])

    assert len(ring) == 4
    assert ring.points[0] == ring.points[-1]
    assert ring.is_complete


def test_close_ring_is_idempotent():
    once = close_ring([_c(31.5, 74.3), _c(31.6, 74.3), _c(31.6, 74.4), _c(31.5, 74.4)])
    twice = close_ring(once.points)

    assert twice == once
    assert close_ring(twice) == once


@pytest.mark.parametrize(
    "points",
    [
        [],
        [_c(31.5, 74.3)],
        [_c(31.5, 74.3), _c(31.6, 74.3)],
        [_c(31.5, 74.3), _c(31.6, 74.3), _c(31.5, 74.3)],
        [_c(31.5, 74.3), _c(31.5, 74.3), _c(31.5, 74.3), _c(31.5, 74.3)],
    ],
)
def test_close_ring_rejects_fewer_than_three_distinct_points(points):
    with pytest.raises(DegenerateRingError):
        close_ring(points)


def test_ring_requires_closure():
    with pytest.raises(ValueError):
        Ring((_c(31.5, 74.3), _c(31.6, 74.3)))


def test_point_in_ring_dha8():
    assert point_in_ring(_c(31.505, 74.355), DHA8)
    assert not point_in_ring(_c(31.60, 74.35), DHA8)


@pytest.mark.parametrize(
    "point",
    [
        _c(31.50, 74.355),  # bottom edge
        _c(31.505, 74.36),  # right edge
        _c(31.51, 74.35),  # vertex
        _c(31.50, 74.35),  # closing vertex
    ],
)
def test_point_on_boundary_counts_as_inside(point):
    assert point_in_ring(point, DHA8)


@pytest.mark.parametrize("ring", [DHA8, L_SHAPE])
def test_point_in_ring_invariant_under_rotation(ring):
    samples = [
        _c(31.49 + i * 0.0025, 74.29 + j * 0.0025)
        for i in range(25)
        for j in range(30)
    ]
    expected = [point_in_ring(point, ring) for point in samples]
    assert any(expected) and not all(expected)

    for shift in range(1, len(ring.vertices)):
        rotated = _rotate(ring, shift)
        assert [point_in_ring(point, rotated) for point in samples] == expected


def test_concave_notch_is_outside():
    assert point_in_ring(_c(31.51, 74.31), L_SHAPE)
    assert not point_in_ring(_c(31.53, 74.33), L_SHAPE)


def test_points_outside_bounding_box_are_outside():
    lats = [point.lat for point in DHA8.vertices]
    lngs = [point.lng for point in DHA8.vertices]
    outside = [
        _c(min(lats) - 0.001, 74.355),
        _c(max(lats) + 0.001, 74.355),
        _c(31.505, min(lngs) - 0.001),
        _c(31.505, max(lngs) + 0.001),
        _c(max(lats) + 1.0, max(lngs) + 1.0),
    ]
    for point in outside:
        assert not point_in_ring(point, DHA8)


def test_incomplete_ring_contains_nothing():
    placeholder = Ring((_c(31.5, 74.3), _c(31.5, 74.3)))

    assert not point_in_ring(_c(31.5, 74.3), placeholder)


def test_point_in_polygon_respects_holes():
    outer = close_ring([_c(31.50, 74.30), _c(31.60, 74.30), _c(31.60, 74.40), _c(31.50, 74.40)])
    hole = close_ring([_c(31.54, 74.34), _c(31.56, 74.34), _c(31.56, 74.36), _c(31.54, 74.36)])
    polygon = Polygon(rings=(outer, hole))

    assert point_in_polygon(_c(31.52, 74.32), polygon)
    assert not point_in_polygon(_c(31.55, 74.35), polygon)
    assert not point_in_polygon(_c(31.70, 74.35), polygon)


def test_geodesic_area_of_small_square():
    area = geodesic_area(DHA8)

    # roughly 1.109 km north-south by 0.950 km east-west on the ellipsoid
    assert area == pytest.approx(1.053e6, rel=0.005)


def test_geodesic_area_is_orientation_independent():
    reversed_ring = close_ring(list(reversed(DHA8.vertices)))

    assert geodesic_area(reversed_ring) == pytest.approx(geodesic_area(DHA8))


def test_geodesic_area_triangle_positive_and_collinear_zero():
    triangle = close_ring([_c(31.50, 74.35), _c(31.51, 74.35), _c(31.51, 74.36)])
    collinear = close_ring([_c(31.50, 74.35), _c(31.51, 74.35), _c(31.52, 74.35)])

    assert geodesic_area(triangle) > 0
    assert geodesic_area(collinear) == pytest.approx(0.0, abs=1.0)


def test_geodesic_area_zero_along_diagonal_great_circle():
    start, end = _c(31.5, 74.35), _c(32.5, 75.5)
    [(mid_lng, mid_lat)] = Geod(ellps="WGS84").npts(start.lng, start.lat, end.lng, end.lat, 1)
    along_geodesic = close_ring([start, _c(mid_lat, mid_lng), end])
    off_geodesic = close_ring([start, _c(mid_lat + 0.05, mid_lng), end])

    assert geodesic_area(along_geodesic) == pytest.approx(0.0, abs=1.0)
    assert geodesic_area(off_geodesic) > 1.0e6


def test_geodesic_area_zero_for_degenerate_ring():
    assert geodesic_area(Ring((_c(31.5, 74.3), _c(31.5, 74.3)))) == 0.0


def test_haversine_distance_km():
    distance = haversine_distance_km(_c(24.86, 67.00), _c(24.95, 67.00))

    assert distance == pytest.approx(10.007, abs=0.01)
    assert haversine_distance_km(_c(24.86, 67.00), _c(24.86, 67.00)) == 0.0


def test_geodesic_perimeter_km():
    perimeter = geodesic_perimeter_km(DHA8)

    assert perimeter == pytest.approx(2 * 1.109 + 2 * 0.950, abs=0.01)


def test_is_valid_coordinate_bounds():
    assert is_valid_coordinate(_c(31.5, 74.3), PAKISTAN)
    assert is_valid_coordinate(_c(23.5, 60.0), PAKISTAN)
    assert not is_valid_coordinate(_c(40.0, 74.3), PAKISTAN)
    assert not is_valid_coordinate(_c(31.5, 80.0), PAKISTAN)
    assert not is_valid_coordinate(_c(91.0, 0.0))
    assert not is_valid_coordinate(_c(0.0, 181.0))
    assert not is_valid_coordinate(_c(math.nan, 74.3), PAKISTAN)
    assert not is_valid_coordinate(_c(31.5, math.inf), PAKISTAN)
    assert is_valid_coordinate(_c(-45.0, 170.0))


def test_require_valid_coordinate_raises():
    with pytest.raises(InvalidCoordinateError):
        require_valid_coordinate(_c(51.5, -0.12), PAKISTAN)


def test_bounding_box_rejects_inverted_ranges():
    with pytest.raises(ValueError):
        BoundingBox(min_lat=37.5, max_lat=23.5, min_lng=60.0, max_lng=78.0)


def test_ring_is_simple_detects_bowtie():
    bowtie = close_ring([_c(31.50, 74.35), _c(31.51, 74.36), _c(31.51, 74.35), _c(31.50, 74.36)])

    assert ring_is_simple(DHA8)
    assert not ring_is_simple(bowtie)


def test_ring_centroid_is_vertex_mean():
    center = ring_centroid(DHA8)

    assert center.lat == pytest.approx(31.505)
    assert center.lng == pytest.approx(74.355)


def test_distance_to_segment_km():
    start, end = _c(31.50, 74.35), _c(31.50, 74.36)

    assert distance_to_segment_km(_c(31.50, 74.355), start, end) == pytest.approx(0.0, abs=1e-9)
    assert distance_to_segment_km(_c(31.51, 74.355), start, end) == pytest.approx(1.112, abs=0.01)
    # beyond the end the nearest point is the endpoint
    assert distance_to_segment_km(_c(31.50, 74.37), start, end) == pytest.approx(
        haversine_distance_km(_c(31.50, 74.37), end), rel=0.01
    )


def test_polygon_stats():
    stats = polygon_stats(DHA8)

    assert stats.vertex_count == 4
    assert stats.area_km2 == pytest.approx(1.05, abs=0.01)
    assert stats.area_acres == pytest.approx(stats.area_m2 / 4046.8564224, abs=0.01)
    assert stats.is_simple
