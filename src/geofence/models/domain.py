"""Domain models for coordinates, boundaries, areas and delivery zones."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, Optional, Union


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A geodetic point in decimal degrees."""

    lat: float
    lng: float

    def as_lng_lat(self) -> list[float]:
        return [self.lng, self.lat]

    @classmethod
    def from_lng_lat(cls, pair) -> "Coordinate":
        lng, lat = pair
        return cls(lat=float(lat), lng=float(lng))


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Deployment bounding box that authored and queried coordinates must fall in."""

    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def __post_init__(self) -> None:
        if not (-90.0 <= self.min_lat < self.max_lat <= 90.0):
            raise ValueError("bounding box latitude range must satisfy -90 <= min_lat < max_lat <= 90")
        if not (-180.0 <= self.min_lng < self.max_lng <= 180.0):
            raise ValueError("bounding box longitude range must satisfy -180 <= min_lng < max_lng <= 180")

    def contains(self, lat: float, lng: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_lng <= lng <= self.max_lng


GLOBAL_BOUNDS = BoundingBox(min_lat=-90.0, max_lat=90.0, min_lng=-180.0, max_lng=180.0)


@dataclass(frozen=True, slots=True)
class Ring:
    """Closed sequence of coordinates; the first point is repeated as the last.

    A ring with at least four points and three distinct vertices is complete and
    may serve as a delivery boundary. Shorter closed rings (such as the ``[p, p]``
    placeholder produced while drawing) are valid values but incomplete.
    """

    points: tuple[Coordinate, ...]

    def __post_init__(self) -> None:
        if not self.points:
            raise ValueError("ring must contain at least one point")
        if self.points[0] != self.points[-1]:
            raise ValueError("ring must be closed (first point equal to last point)")

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Coordinate]:
        return iter(self.points)

    @property
    def vertices(self) -> tuple[Coordinate, ...]:
        """Open vertex list, without the closing duplicate."""
        return self.points[:-1] if len(self.points) > 1 else self.points

    @property
    def distinct_count(self) -> int:
        return len(set(self.vertices))

    @property
    def is_complete(self) -> bool:
        return len(self.points) >= 4 and self.distinct_count >= 3


@dataclass(frozen=True, slots=True)
class Polygon:
    """Outer boundary ring followed by optional holes."""

    rings: tuple[Ring, ...] = ()

    @property
    def outer_ring(self) -> Optional[Ring]:
        return self.rings[0] if self.rings else None

    @property
    def holes(self) -> tuple[Ring, ...]:
        return self.rings[1:]

    @property
    def has_boundary(self) -> bool:
        outer = self.outer_ring
        return outer is not None and outer.is_complete


EMPTY_POLYGON = Polygon()


@dataclass(frozen=True, slots=True)
class FlatFee:
    fee: float

    def __post_init__(self) -> None:
        if self.fee < 0:
            raise ValueError("flat fee must be >= 0")


@dataclass(frozen=True, slots=True)
class DistanceFee:
    base_fee: float
    per_km_fee: float
    max_km: float

    def __post_init__(self) -> None:
        if self.base_fee < 0 or self.per_km_fee < 0:
            raise ValueError("distance fees must be >= 0")
        if self.max_km <= 0:
            raise ValueError("max_km must be > 0")


FeeStructure = Union[FlatFee, DistanceFee]


@dataclass(frozen=True, slots=True)
class DeliveryZone:
    """Fee and service terms for the single zone owned by an area."""

    id: str
    area_id: str
    fee_structure: FeeStructure
    min_order_amount: float = 0.0
    estimated_time: str = "30-45 min"
    free_delivery_above: Optional[float] = None
    is_active: bool = False

    def __post_init__(self) -> None:
        if self.min_order_amount < 0:
            raise ValueError("min_order_amount must be >= 0")
        if self.free_delivery_above is not None and self.free_delivery_above < 0:
            raise ValueError("free_delivery_above must be >= 0")


@dataclass(frozen=True, slots=True)
class Area:
    """A named delivery area with its boundary, center and optional zone."""

    id: str
    name: str
    city: str
    center: Coordinate
    boundary: Polygon = EMPTY_POLYGON
    is_active: bool = True
    zone: Optional[DeliveryZone] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = field(default=None, compare=False)
