"""Error types raised by the geometry, ingest and catalog layers.

Every error derives from :class:`GeofenceError`, itself a ``ValueError``, so
callers that only care about "bad input" can catch one type. Each class carries
a stable ``code`` used by the API layer when reporting the failure.
"""

from __future__ import annotations


class GeofenceError(ValueError):
    code = "geofence_error"


class InvalidCoordinateError(GeofenceError):
    code = "invalid_coordinate"

    def __init__(self, lat: float, lng: float, message: str | None = None) -> None:
        self.lat = lat
        self.lng = lng
        super().__init__(message or f"Coordinate ({lat}, {lng}) is outside the serviceable bounds.")


class DegenerateRingError(GeofenceError):
    code = "degenerate_ring"


class IncompleteRingError(GeofenceError):
    code = "incomplete_ring"


class MinimumVertexCountError(GeofenceError):
    code = "minimum_vertex_count"


class EditorStateError(GeofenceError):
    code = "editor_state"


class IngestError(GeofenceError):
    code = "ingest_error"


class MalformedLineError(IngestError):
    code = "malformed_line"

    def __init__(self, line_number: int, line: str = "") -> None:
        self.line_number = line_number
        self.line = line
        super().__init__(f"Invalid coordinate pair at line {line_number}: expected 'lat, lng'.")


class OutOfBoundsError(IngestError):
    code = "out_of_bounds"

    def __init__(self, line_number: int, lat: float, lng: float) -> None:
        self.line_number = line_number
        self.lat = lat
        self.lng = lng
        super().__init__(f"Out of bounds at line {line_number}: ({lat}, {lng}).")


class InsufficientPointsError(IngestError):
    code = "insufficient_points"

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"Minimum 3 distinct points required, got {count}.")


class CatalogError(GeofenceError):
    code = "catalog_error"


class AreaNotFoundError(CatalogError, LookupError):
    code = "area_not_found"

    def __init__(self, area_id: str) -> None:
        self.area_id = area_id
        super().__init__(f"Area '{area_id}' not found.")


class NoBoundaryError(CatalogError):
    code = "no_boundary"

    def __init__(self, area_id: str) -> None:
        self.area_id = area_id
        super().__init__(
            f"Area '{area_id}' has no complete boundary (min 3 points + closing); "
            "draw or paste a polygon before activating delivery."
        )


class AreaInactiveError(CatalogError):
    code = "area_inactive"

    def __init__(self, area_id: str) -> None:
        self.area_id = area_id
        super().__init__(f"Area '{area_id}' is inactive; activate the area before its delivery zone.")


class NoDeliveryZoneError(CatalogError):
    code = "no_delivery_zone"

    def __init__(self, area_id: str) -> None:
        self.area_id = area_id
        super().__init__(f"Area '{area_id}' has no delivery zone configured.")
