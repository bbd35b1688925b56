"""Request-scoped access to the catalog and engine built by ``create_app``."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from ..errors import AreaNotFoundError, GeofenceError
from ..models.domain import BoundingBox
from ..services.catalog import ZoneCatalog
from ..services.serviceability import ServiceabilityEngine


def get_catalog(request: Request) -> ZoneCatalog:
    return request.app.state.catalog


def get_engine(request: Request) -> ServiceabilityEngine:
    return request.app.state.engine


def get_bounds(request: Request) -> BoundingBox:
    return request.app.state.bounds


def to_http_exception(exc: GeofenceError) -> HTTPException:
    detail: dict = {"error": exc.code, "message": str(exc)}
    line_number = getattr(exc, "line_number", None)
    if line_number is not None:
        detail["line"] = line_number
    status_code = status.HTTP_404_NOT_FOUND if isinstance(exc, AreaNotFoundError) else status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=status_code, detail=detail)
