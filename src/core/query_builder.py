"""Turn structured trip parameters into a prompt and a retrieval configuration."""
from __future__ import annotations

from typing import Tuple

from src.core.prompts import current_position_placeholder, trip_activities_prompt
from src.core.schemas import RetrievalConfiguration, TripQuery


def build_trip_query(query: TripQuery) -> Tuple[str, RetrievalConfiguration]:
    """Build the prompt text and grounding configuration for one search.

    The prompt names every activity category and asks for a day-by-day answer
    because the response comes back as free text: map grounding cannot be
    combined with a structured response schema.

    Both grounding tools are always enabled. The location bias is only set
    when the query carries coordinates.
    """

    prompt = trip_activities_prompt.format(
        destination=query.destination or current_position_placeholder,
        start_date=query.start_date.isoformat(),
        end_date=query.end_date.isoformat(),
        radius_km=query.radius_km,
    )
    config = RetrievalConfiguration(
        maps_grounding=True,
        search_grounding=True,
        location_bias=query.coordinates,
    )
    return prompt, config
