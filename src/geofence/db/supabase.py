"""Supabase client shared by the area and delivery zone persistence layer."""

import logging
from functools import lru_cache

from supabase import Client, create_client

from ..config import settings

# Tables used by the delivery zone service:
#
#   areas           (id text pk, name, city, center jsonb, polygon jsonb,
#                    geometry_wkt text, is_active bool, created_at, updated_at)
#   delivery_zones  (id text pk, area_id text fk -> areas.id on delete cascade,
#                    fee_structure jsonb, min_order_amount, estimated_time,
#                    free_delivery_above, is_active bool)
AREAS_TABLE = "areas"
DELIVERY_ZONES_TABLE = "delivery_zones"


def is_configured() -> bool:
    return bool(settings.supabase_url and settings.supabase_key)


@lru_cache()
def get_supabase_client() -> Client | None:
    """Return the cached client, or None when the service runs file-only.

    Creating the client does not open a connection; the first query may still
    fail with a network error.
    """
    if not is_configured():
        logging.info("Supabase credentials not configured; using the catalog file only")
        return None

    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logging.error(f"Failed to create Supabase client for {settings.supabase_url}: {e}")
        return None
