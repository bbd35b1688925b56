"""FastAPI application entry point."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import areas, delivery, health, polygons
from .config import settings
from .data.catalog_repository import load_catalog_areas
from .services.catalog import ZoneCatalog
from .services.serviceability import ServiceabilityEngine


def create_app(
    *,
    catalog: ZoneCatalog | None = None,
    catalog_file: Path | None = None,
    data_root: Path | None = None,
) -> FastAPI:
    logging.basicConfig(level=settings.log_level.upper())

    bounds = settings.bounding_box()
    catalog_file = catalog_file or settings.catalog_file
    if catalog is None:
        catalog = ZoneCatalog(bounds, load_catalog_areas(catalog_file))

    app = FastAPI(title=settings.app_name)
    app.state.bounds = bounds
    app.state.catalog = catalog
    app.state.catalog_file = catalog_file
    app.state.data_root = data_root or catalog_file.parent
    app.state.engine = ServiceabilityEngine(
        catalog,
        bounds,
        not_in_service_message=settings.not_in_service_message,
    )

    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(delivery.router, prefix=settings.api_prefix)
    app.include_router(areas.router, prefix=settings.api_prefix)
    app.include_router(polygons.router, prefix=settings.api_prefix)
    return app


app = create_app()
