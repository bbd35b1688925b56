"""Serviceability checks against the zone catalog."""

from __future__ import annotations

from typing import Optional

from ...errors import InvalidCoordinateError
from ...models.domain import Area, BoundingBox, Coordinate, DeliveryZone, DistanceFee
from ..catalog import ZoneCatalog
from ..geospatial import haversine_distance_km, is_valid_coordinate, point_in_ring
from .fees import compute_fee
from .models import InService, NotInService, OutOfRange, ServiceabilityResult

DEFAULT_NOT_IN_SERVICE_MESSAGE = "Sorry, we don't deliver to this location yet."


class ServiceabilityEngine:
    """Answer whether a coordinate is deliverable, by which zone and at what fee."""

    def __init__(
        self,
        catalog: ZoneCatalog,
        bounds: BoundingBox,
        *,
        not_in_service_message: str = DEFAULT_NOT_IN_SERVICE_MESSAGE,
    ) -> None:
        self.catalog = catalog
        self.bounds = bounds
        self.not_in_service_message = not_in_service_message

    def matching_zones(self, query: Coordinate) -> list[tuple[Area, DeliveryZone, float]]:
        """All active zones whose boundary covers ``query``, nearest center first."""

        matches: list[tuple[Area, DeliveryZone, float]] = []
        for area, zone in self.catalog.snapshot().active_zones():
            outer = area.boundary.outer_ring
            if outer is not None and point_in_ring(query, outer):
                matches.append((area, zone, haversine_distance_km(query, area.center)))
        # Overlapping zones resolve to the nearest center; id keeps equal distances stable.
        matches.sort(key=lambda match: (match[2], match[0].id))
        return matches

    def check(self, query: Coordinate, order_amount: Optional[float] = None) -> ServiceabilityResult:
        if not is_valid_coordinate(query, self.bounds):
            raise InvalidCoordinateError(query.lat, query.lng)

        matches = self.matching_zones(query)
        if not matches:
            return NotInService(message=self.not_in_service_message)

        area, zone, distance_km = matches[0]
        fee = compute_fee(zone, distance_km, order_amount)
        if fee is None:
            max_km = zone.fee_structure.max_km if isinstance(zone.fee_structure, DistanceFee) else 0.0
            return OutOfRange(
                area_id=area.id,
                zone_id=zone.id,
                area_name=area.name,
                city=area.city,
                distance_km=distance_km,
                max_km=max_km,
                message=(
                    f"{area.name} delivers up to {max_km:g} km from its center; "
                    f"this location is {distance_km:.2f} km away."
                ),
            )

        return InService(
            area_id=area.id,
            zone_id=zone.id,
            area_name=area.name,
            city=area.city,
            fee=fee,
            estimated_time=zone.estimated_time,
            min_order_amount=zone.min_order_amount,
            distance_km=distance_km,
            free_delivery_above=zone.free_delivery_above,
            meets_minimum_order=None if order_amount is None else order_amount >= zone.min_order_amount,
        )
