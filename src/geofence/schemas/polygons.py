"""Pydantic models for polygon authoring endpoints."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from .common import GeoJSONPolygonModel, LatLngModel, PolygonStatsModel


class ParseCoordinatesRequest(BaseModel):
    text: str = Field(..., description="One 'lat, lng' pair per line.")


class ParsedPolygonResponse(BaseModel):
    polygon: GeoJSONPolygonModel
    center: LatLngModel
    pointCount: int
    stats: PolygonStatsModel


class EditOperation(BaseModel):
    op: Literal["begin", "add_first", "append", "insert", "insert_nearest", "move", "delete", "highlight", "clear"]
    index: Optional[int] = Field(default=None, ge=0)
    point: Optional[LatLngModel] = None

    @model_validator(mode="after")
    def _check_arguments(self) -> "EditOperation":
        if self.op in {"add_first", "append", "insert", "insert_nearest", "move", "highlight"} and self.point is None:
            raise ValueError(f"operation '{self.op}' requires a point")
        if self.op in {"insert", "move", "delete"} and self.index is None:
            raise ValueError(f"operation '{self.op}' requires an index")
        return self


class PolygonEditRequest(BaseModel):
    polygon: Optional[GeoJSONPolygonModel] = Field(
        default=None, description="Current ring in [lng, lat] order, closed; omit to start a new polygon."
    )
    operations: list[EditOperation] = Field(..., min_length=1)
    commit: bool = Field(default=False, description="Require the result to be a committable polygon.")


class PolygonEditResponse(BaseModel):
    polygon: Optional[GeoJSONPolygonModel] = None
    state: str
    vertexCount: int
    highlighted: Optional[int] = None
    stats: Optional[PolygonStatsModel] = None


class PolygonStatsRequest(BaseModel):
    polygon: GeoJSONPolygonModel
