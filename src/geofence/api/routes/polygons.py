"""Admin polygon authoring tools: coordinate paste, vertex editing and measurements."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ..dependencies import get_bounds, to_http_exception
from ...config import settings
from ...errors import GeofenceError
from ...models.domain import BoundingBox, Polygon
from ...schemas.polygons import (
    EditOperation,
    ParseCoordinatesRequest,
    ParsedPolygonResponse,
    PolygonEditRequest,
    PolygonEditResponse,
    PolygonStatsRequest,
)
from ...schemas.common import PolygonStatsModel
from ...services import ingest
from ...services.editor import PolygonEditor
from ...services.geospatial import ring_centroid
from ...services.outputs.formatter import (
    latlng_from_model,
    latlng_to_model,
    polygon_to_model,
    ring_from_model,
    stats_to_model,
)

router = APIRouter(prefix="/admin/polygons", tags=["admin-polygons"])


@router.post("/parse", response_model=ParsedPolygonResponse, status_code=status.HTTP_200_OK)
def parse_coordinates(
    payload: ParseCoordinatesRequest,
    bounds: BoundingBox = Depends(get_bounds),
) -> ParsedPolygonResponse:
    """Turn pasted ``lat, lng`` lines into a closed boundary with a suggested center."""
    try:
        ring = ingest.parse_text(payload.text, bounds)
    except GeofenceError as exc:
        raise to_http_exception(exc) from exc

    return ParsedPolygonResponse(
        polygon=polygon_to_model(Polygon(rings=(ring,))),
        center=latlng_to_model(ring_centroid(ring)),
        pointCount=len(ring.vertices),
        stats=stats_to_model(ring),
    )


def _apply(editor: PolygonEditor, operation: EditOperation) -> PolygonEditor:
    point = latlng_from_model(operation.point) if operation.point is not None else None
    match operation.op:
        case "begin":
            return editor.begin()
        case "add_first":
            return editor.add_first_vertex(point)
        case "append":
            return editor.append_vertex(point)
        case "insert":
            return editor.insert_vertex(operation.index, point)
        case "insert_nearest":
            return editor.insert_on_nearest_edge(point, settings.edge_insert_threshold_km)
        case "move":
            return editor.move_vertex(operation.index, point)
        case "delete":
            return editor.delete_vertex(operation.index)
        case "highlight":
            return editor.highlight(point)
        case "clear":
            return editor.clear()
        case _:
            raise ValueError(f"Unknown edit operation '{operation.op}'.")


@router.post("/edit", response_model=PolygonEditResponse, status_code=status.HTTP_200_OK)
def edit_polygon(
    payload: PolygonEditRequest,
    bounds: BoundingBox = Depends(get_bounds),
) -> PolygonEditResponse:
    """Apply editor transitions in order to the supplied ring and return the new ring."""
    try:
        ring = ring_from_model(payload.polygon)
        editor = PolygonEditor.from_ring(ring, bounds) if ring is not None else PolygonEditor(bounds=bounds)
        for operation in payload.operations:
            editor = _apply(editor, operation)
        if payload.commit:
            editor.commit()
    except GeofenceError as exc:
        raise to_http_exception(exc) from exc
    except (IndexError, ValueError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    ring = editor.ring
    return PolygonEditResponse(
        polygon=polygon_to_model(Polygon(rings=(ring,))) if ring is not None else None,
        state=editor.state.value,
        vertexCount=editor.vertex_count,
        highlighted=editor.highlighted,
        stats=stats_to_model(ring) if ring is not None and ring.is_complete else None,
    )


@router.post("/stats", response_model=PolygonStatsModel, status_code=status.HTTP_200_OK)
def polygon_statistics(payload: PolygonStatsRequest) -> PolygonStatsModel:
    try:
        ring = ring_from_model(payload.polygon)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if ring is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Polygon has no ring.")
    return stats_to_model(ring)
