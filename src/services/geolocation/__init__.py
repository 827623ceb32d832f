"""Current position services.

This module provides the best-effort position used to bias map grounding,
either pushed by the client's device or looked up once from the host's IP.

Public API:
    - CoordinateProvider: Holder of the current position
    - create_coordinate_provider: Factory wiring the IP locator from settings
    - locate_by_ip: One-shot IP geolocation lookup
"""
from src.services.geolocation.geolocation import (
    CoordinateProvider,
    Locator,
    create_coordinate_provider,
    locate_by_ip,
)

__all__ = [
    "CoordinateProvider",
    "Locator",
    "create_coordinate_provider",
    "locate_by_ip",
]
