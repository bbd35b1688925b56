"""Delivery serviceability engine."""

from .engine import ServiceabilityEngine
from .models import InService, NotInService, OutOfRange, ServiceabilityResult

__all__ = ["ServiceabilityEngine", "InService", "NotInService", "OutOfRange", "ServiceabilityResult"]
