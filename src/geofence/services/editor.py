"""Interactive polygon authoring as an immutable editor value.

Each transition returns a new :class:`PolygonEditor`; the rendering layer keeps
the latest value and redraws from it. The ring held by the editor is closed
after every transition, so the first vertex and the closing duplicate never
diverge, even mid-drag.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from ..errors import EditorStateError, IncompleteRingError, MinimumVertexCountError
from ..models.domain import BoundingBox, Coordinate, Polygon, Ring
from .geospatial import distance_to_segment_km, haversine_distance_km, require_valid_coordinate

MIN_DISTINCT_VERTICES = 3


class EditorState(str, Enum):
    EMPTY = "empty"
    PLACING_FIRST_POINT = "placing_first_point"
    EDITING = "editing"
    CLOSED = "closed"


@dataclass(frozen=True, slots=True)
class PolygonEditor:
    bounds: Optional[BoundingBox] = None
    ring: Optional[Ring] = None
    started: bool = False
    highlighted: Optional[int] = None

    @classmethod
    def from_ring(cls, ring: Ring, bounds: Optional[BoundingBox] = None) -> "PolygonEditor":
        for point in ring.vertices:
            require_valid_coordinate(point, bounds)
        return cls(bounds=bounds, ring=ring, started=True)

    @classmethod
    def from_polygon(cls, polygon: Polygon, bounds: Optional[BoundingBox] = None) -> "PolygonEditor":
        if polygon.outer_ring is None:
            return cls(bounds=bounds)
        return cls.from_ring(polygon.outer_ring, bounds)

    @property
    def state(self) -> EditorState:
        if self.ring is None:
            return EditorState.PLACING_FIRST_POINT if self.started else EditorState.EMPTY
        if self.ring.is_complete:
            return EditorState.CLOSED
        return EditorState.EDITING

    @property
    def vertices(self) -> tuple[Coordinate, ...]:
        return self.ring.vertices if self.ring is not None else ()

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    def _with_vertices(self, vertices: list[Coordinate]) -> "PolygonEditor":
        return replace(self, ring=Ring(tuple(vertices) + (vertices[0],)), highlighted=None)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.vertex_count:
            raise IndexError(f"vertex index {index} out of range for {self.vertex_count} vertices")

    def begin(self) -> "PolygonEditor":
        if self.state is not EditorState.EMPTY:
            raise EditorStateError("Polygon drawing has already started.")
        return replace(self, started=True)

    def add_first_vertex(self, point: Coordinate) -> "PolygonEditor":
        if self.ring is not None:
            raise EditorStateError("Polygon already has a first vertex; append instead.")
        require_valid_coordinate(point, self.bounds)
        return replace(self, ring=Ring((point, point)), started=True, highlighted=None)

    def append_vertex(self, point: Coordinate) -> "PolygonEditor":
        if self.ring is None:
            return self.add_first_vertex(point)
        require_valid_coordinate(point, self.bounds)
        return self._with_vertices([*self.vertices, point])

    def insert_vertex(self, index: int, point: Coordinate) -> "PolygonEditor":
        """Insert ``point`` before open vertex ``index`` (``index == vertex_count`` appends)."""

        if self.ring is None:
            raise EditorStateError("Add a first vertex before inserting.")
        if not 1 <= index <= self.vertex_count:
            raise IndexError(f"insert index {index} out of range 1..{self.vertex_count}")
        require_valid_coordinate(point, self.bounds)
        vertices = list(self.vertices)
        vertices.insert(index, point)
        return self._with_vertices(vertices)

    def nearest_edge_index(self, cursor: Coordinate) -> tuple[Optional[int], float]:
        """Return the edge (start vertex index) closest to ``cursor`` and its distance in km."""

        if self.ring is None or len(self.ring) < 2:
            return None, float("inf")
        points = self.ring.points
        best_index: Optional[int] = None
        best_distance = float("inf")
        for index in range(len(points) - 1):
            distance = distance_to_segment_km(cursor, points[index], points[index + 1])
            if distance < best_distance:
                best_index, best_distance = index, distance
        return best_index, best_distance

    def insert_on_nearest_edge(self, point: Coordinate, max_distance_km: float) -> "PolygonEditor":
        """Split the nearest edge at ``point`` when close enough, otherwise append."""

        if self.state is not EditorState.CLOSED:
            return self.append_vertex(point)
        edge_index, distance = self.nearest_edge_index(point)
        if edge_index is None or distance > max_distance_km:
            return self.append_vertex(point)
        return self.insert_vertex(edge_index + 1, point)

    def move_vertex(self, index: int, point: Coordinate) -> "PolygonEditor":
        self._check_index(index)
        require_valid_coordinate(point, self.bounds)
        vertices = list(self.vertices)
        vertices[index] = point
        moved = self._with_vertices(vertices)
        return replace(moved, highlighted=self.highlighted)

    def delete_vertex(self, index: int) -> "PolygonEditor":
        self._check_index(index)
        vertices = [vertex for position, vertex in enumerate(self.vertices) if position != index]
        if len(set(vertices)) < MIN_DISTINCT_VERTICES:
            raise MinimumVertexCountError(
                f"Cannot delete: polygon must keep at least {MIN_DISTINCT_VERTICES} points."
            )
        return self._with_vertices(vertices)

    def nearest_vertex_index(self, cursor: Coordinate) -> Optional[int]:
        vertices = self.vertices
        if not vertices:
            return None
        return min(range(len(vertices)), key=lambda i: haversine_distance_km(cursor, vertices[i]))

    def highlight(self, cursor: Coordinate) -> "PolygonEditor":
        return replace(self, highlighted=self.nearest_vertex_index(cursor))

    def clear(self) -> "PolygonEditor":
        return PolygonEditor(bounds=self.bounds)

    def commit(self) -> Polygon:
        if self.state is not EditorState.CLOSED:
            raise IncompleteRingError(
                f"Valid polygon required (min {MIN_DISTINCT_VERTICES} points + closing), "
                f"have {self.vertex_count} point(s)."
            )
        return Polygon(rings=(self.ring,))
