"""Serviceability verdicts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(slots=True)
class InService:
    area_id: str
    zone_id: str
    area_name: str
    city: str
    fee: float
    estimated_time: str
    min_order_amount: float
    distance_km: float
    free_delivery_above: Optional[float] = None
    meets_minimum_order: Optional[bool] = None
    in_service: bool = True


@dataclass(slots=True)
class NotInService:
    message: str
    in_service: bool = False


@dataclass(slots=True)
class OutOfRange:
    """The point lies inside a zone polygon but beyond the zone's distance cap."""

    area_id: str
    zone_id: str
    area_name: str
    city: str
    distance_km: float
    max_km: float
    message: str
    in_service: bool = False


ServiceabilityResult = Union[InService, NotInService, OutOfRange]
