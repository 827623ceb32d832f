from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field
from src.core.config import DEFAULT_RADIUS_KM
from src.core.schemas import Coordinates, SearchPhase, SourceReference, TripQuery, default_trip_dates
from src.core.types import Destination, RadiusKm


class SearchRequest(BaseModel):
    """Form values submitted to start a search.

    Defaults mirror the form: today to one week later, 30 km around.
    """

    destination: Destination = Field(
        default="", description="Town or village; empty to search around the current position"
    )
    start_date: date = Field(
        default_factory=lambda: default_trip_dates()[0], description="First day of the stay"
    )
    end_date: date = Field(
        default_factory=lambda: default_trip_dates()[1], description="Last day of the stay"
    )
    radius_km: RadiusKm = Field(default=DEFAULT_RADIUS_KM, description="Search radius in kilometres")
    coordinates: Optional[Coordinates] = Field(
        default=None,
        description="Position to use for this search instead of the stored current position",
    )

    def to_trip_query(self) -> TripQuery:
        return TripQuery(**self.model_dump())


class PositionRequest(BaseModel):
    """Device position pushed by the client; null clears it."""

    coordinates: Optional[Coordinates] = None


class SearchStateResponse(BaseModel):
    """Current search phase and its result, as rendered by the client."""

    phase: SearchPhase = Field(..., description="idle, searching, succeeded or failed")
    itinerary_text: Optional[str] = Field(
        default=None, description="Markdown answer organised day by day when the search succeeded"
    )
    sources: List[SourceReference] = Field(
        default_factory=list, description="Places and web pages that grounded the answer"
    )
    error: Optional[str] = Field(default=None, description="User-facing message when the search failed")
