"""Pydantic data models for the local happenings search.

This module contains the data models that flow through one search cycle, from
the trip parameters entered by the user to the outcome handed back to the
presentation layer.

Key model categories:
- Coordinates / TripQuery: what the user asks for
- RetrievalConfiguration: which grounding tools the generation call enables
- PlaceChunk / WebChunk / UnrecognizedChunk: classified grounding metadata
- SourceReference: one normalised, linkable source
- SearchSuccess / SearchFailure: the terminal value of a search cycle
"""
from __future__ import annotations

from datetime import date, timedelta
from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from src.core.config import DEFAULT_RADIUS_KM, DEFAULT_TRIP_DAYS
from src.core.types import Destination, Lat, Lon, RadiusKm


def default_trip_dates(today: Optional[date] = None) -> Tuple[date, date]:
    """Return the default stay: from today to one week later."""

    start = today or date.today()
    return start, start + timedelta(days=DEFAULT_TRIP_DAYS)


class Coordinates(BaseModel):
    """A latitude/longitude pair in decimal degrees."""

    latitude: Lat = Field(description="Latitude in decimal degrees")
    longitude: Lon = Field(description="Longitude in decimal degrees")

    model_config = ConfigDict(frozen=True)


class TripQuery(BaseModel):
    """Structured trip parameters for one search.

    An empty destination is valid and means "around my current position".
    The date order is not validated; callers are expected to send
    ``start_date <= end_date``.
    """

    destination: Destination = Field(default="", description="Town, village or empty for 'around me'")
    start_date: date = Field(description="First day of the stay (ISO 8601)")
    end_date: date = Field(description="Last day of the stay (ISO 8601)")
    radius_km: RadiusKm = Field(default=DEFAULT_RADIUS_KM, description="Search radius in kilometres")
    coordinates: Optional[Coordinates] = Field(
        default=None, description="Current position of the searcher, when known"
    )

    model_config = ConfigDict(frozen=True)


class RetrievalConfiguration(BaseModel):
    """Grounding tools requested from the generation service."""

    maps_grounding: bool = True
    search_grounding: bool = True
    location_bias: Optional[Coordinates] = None

    model_config = ConfigDict(frozen=True)


class PlaceChunk(BaseModel):
    """Grounding chunk that points to a map place."""

    kind: Literal["place"] = "place"
    title: Optional[str] = None
    uri: Optional[str] = None


class WebChunk(BaseModel):
    """Grounding chunk that points to a web page."""

    kind: Literal["web"] = "web"
    title: Optional[str] = None
    uri: Optional[str] = None


class UnrecognizedChunk(BaseModel):
    """Anything the provider returned that is neither a place nor a web page."""

    kind: Literal["unrecognized"] = "unrecognized"
    payload: Any = None


RawGroundingChunk = Union[PlaceChunk, WebChunk, UnrecognizedChunk]


class SourceReference(BaseModel):
    """A source that grounded the answer, ready to be rendered as a link."""

    kind: Literal["place", "web"]
    title: str
    uri: str


class SearchPhase(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SearchSuccess(BaseModel):
    status: Literal["success"] = "success"
    itinerary_text: str
    sources: List[SourceReference] = Field(default_factory=list)


class SearchFailure(BaseModel):
    status: Literal["error"] = "error"
    message: str


SearchOutcome = Annotated[Union[SearchSuccess, SearchFailure], Field(discriminator="status")]


class SearchSnapshot(BaseModel):
    """Phase and outcome of the search cycle at one point in time."""

    phase: SearchPhase
    outcome: Optional[SearchOutcome] = None

    model_config = ConfigDict(frozen=True)


__all__ = [
    "Coordinates",
    "PlaceChunk",
    "RawGroundingChunk",
    "RetrievalConfiguration",
    "SearchFailure",
    "SearchOutcome",
    "SearchPhase",
    "SearchSnapshot",
    "SearchSuccess",
    "SourceReference",
    "TripQuery",
    "UnrecognizedChunk",
    "WebChunk",
    "default_trip_dates",
]
