"""Pydantic request/response models for area and delivery zone endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from .common import GeoJSONPolygonModel, LatLngModel, PolygonStatsModel


class FlatFeeModel(BaseModel):
    type: Literal["flat"] = "flat"
    fee: float = Field(..., ge=0.0)


class DistanceFeeModel(BaseModel):
    type: Literal["distance"] = "distance"
    baseFee: float = Field(..., ge=0.0)
    perKmFee: float = Field(..., ge=0.0)
    maxKm: float = Field(..., gt=0.0)


FeeStructureModel = Annotated[Union[FlatFeeModel, DistanceFeeModel], Field(discriminator="type")]


class DeliveryZonePayload(BaseModel):
    feeStructure: FeeStructureModel
    minOrderAmount: float = Field(default=0.0, ge=0.0)
    estimatedTime: str = Field(default="30-45 min", description='Estimated delivery time, e.g. "30-45 min".')
    freeDeliveryAbove: Optional[float] = Field(default=None, ge=0.0)
    isActive: bool = False


class DeliveryZoneModel(DeliveryZonePayload):
    id: str
    areaId: str


class AreaModel(BaseModel):
    id: str
    name: str
    city: str
    center: LatLngModel
    polygon: GeoJSONPolygonModel
    isActive: bool
    deliveryZone: Optional[DeliveryZoneModel] = None
    stats: Optional[PolygonStatsModel] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class CreateAreaPayload(BaseModel):
    name: str = Field(..., min_length=1)
    city: str = ""
    center: Optional[LatLngModel] = Field(
        default=None, description="Delivery center; defaults to the mean of the boundary vertices."
    )
    polygon: Optional[GeoJSONPolygonModel] = Field(default=None, description="Boundary in [lng, lat] order.")
    isActive: bool = True
    deliveryZone: Optional[DeliveryZonePayload] = None


class UpdateAreaPayload(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    city: Optional[str] = None
    center: Optional[LatLngModel] = None
    polygon: Optional[GeoJSONPolygonModel] = None


class ActivePayload(BaseModel):
    isActive: bool


class AreaListResponse(BaseModel):
    areas: list[AreaModel]
    total: int


class PublicZoneSummary(BaseModel):
    feeStructure: FeeStructureModel
    minOrderAmount: float
    estimatedTime: str
    freeDeliveryAbove: Optional[float] = None


class PublicAreaModel(BaseModel):
    id: str
    name: str
    city: str
    center: LatLngModel
    deliveryZone: Optional[PublicZoneSummary] = None
    hasDeliveryZone: bool


class PublicAreasResponse(BaseModel):
    areas: list[PublicAreaModel]
