"""Pydantic models for public serviceability endpoints."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


class DeliveryCalculateRequest(BaseModel):
    lat: float
    lng: float
    orderAmount: Optional[float] = Field(default=None, ge=0.0)


class AreaRefModel(BaseModel):
    id: str
    name: str
    city: str


class DeliveryCheckResponse(BaseModel):
    inService: bool
    deliverable: bool
    reason: Literal["in_service", "not_in_service", "out_of_range"]
    message: str
    area: Optional[AreaRefModel] = None
    zoneId: Optional[str] = None
    deliveryFee: Optional[float] = None
    minOrderAmount: Optional[float] = None
    estimatedTime: Optional[str] = None
    freeDeliveryAbove: Optional[float] = None
    distanceKm: Optional[float] = None
    maxDistanceKm: Optional[float] = None
    meetsMinimumOrder: Optional[bool] = None
