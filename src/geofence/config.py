"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models.domain import BoundingBox


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="GEOFENCE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Delivery Zone Service"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root logging level applied at app creation.")
    data_root: Path = Field(default=Path("data"), description="Root directory for catalog and export files.")
    catalog_file: Path = Field(
        default=Path("data/catalog.json"),
        description="JSON snapshot of areas and delivery zones used when the database is not configured.",
    )

    # Deployment bounding box (reference deployment covers Pakistan)
    bounds_min_lat: float = Field(default=23.5, ge=-90.0, le=90.0)
    bounds_max_lat: float = Field(default=37.5, ge=-90.0, le=90.0)
    bounds_min_lng: float = Field(default=60.0, ge=-180.0, le=180.0)
    bounds_max_lng: float = Field(default=78.0, ge=-180.0, le=180.0)

    edge_insert_threshold_km: float = Field(
        default=0.25,
        gt=0.0,
        description="Maximum distance from an edge for a click to insert a vertex on it instead of appending.",
    )
    not_in_service_message: str = Field(
        default="Sorry, we don't deliver to this location yet.",
        description="Message returned when no active delivery zone covers a coordinate.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @field_validator("data_root", "catalog_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @model_validator(mode="after")
    def _check_bounds(self) -> "Settings":
        if self.bounds_min_lat >= self.bounds_max_lat:
            raise ValueError("bounds_min_lat must be less than bounds_max_lat")
        if self.bounds_min_lng >= self.bounds_max_lng:
            raise ValueError("bounds_min_lng must be less than bounds_max_lng")
        return self

    def bounding_box(self) -> BoundingBox:
        return BoundingBox(
            min_lat=self.bounds_min_lat,
            max_lat=self.bounds_max_lat,
            min_lng=self.bounds_min_lng,
            max_lng=self.bounds_max_lng,
        )


settings = Settings()
