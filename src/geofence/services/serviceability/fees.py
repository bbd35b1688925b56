"""Delivery fee computation for flat and distance-based zones."""

from __future__ import annotations

from typing import Optional

from ...models.domain import DeliveryZone, DistanceFee, FlatFee


def qualifies_for_free_delivery(zone: DeliveryZone, order_amount: Optional[float]) -> bool:
    return (
        zone.free_delivery_above is not None
        and order_amount is not None
        and order_amount >= zone.free_delivery_above
    )


def compute_fee(zone: DeliveryZone, distance_km: float, order_amount: Optional[float] = None) -> Optional[float]:
    """Return the delivery fee, or None when the distance exceeds the zone's cap."""

    structure = zone.fee_structure
    if isinstance(structure, FlatFee):
        fee = structure.fee
    elif isinstance(structure, DistanceFee):
        if distance_km > structure.max_km:
            return None
        fee = structure.base_fee + structure.per_km_fee * distance_km
    else:
        raise TypeError(f"Unsupported fee structure: {type(structure).__name__}")

    if qualifies_for_free_delivery(zone, order_amount):
        return 0.0
    return round(fee, 2)
