"""Shared type aliases used across the search modules."""
from __future__ import annotations

from typing import Annotated

from pydantic import Field, StringConstraints

from src.core.config import MAX_RADIUS_KM, MIN_RADIUS_KM

Lat = Annotated[float, Field(ge=-90, le=90)]
Lon = Annotated[float, Field(ge=-180, le=180)]
RadiusKm = Annotated[int, Field(ge=MIN_RADIUS_KM, le=MAX_RADIUS_KM)]
Destination = Annotated[str, StringConstraints(strip_whitespace=True, max_length=200)]
