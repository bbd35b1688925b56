"""Route group exports."""

from . import areas, delivery, health, polygons

__all__ = ["areas", "delivery", "health", "polygons"]
