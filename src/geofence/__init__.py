"""Delivery zone serviceability service."""

__version__ = "0.1.0"
