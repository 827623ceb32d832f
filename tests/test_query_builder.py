"""Tests for prompt and retrieval configuration building."""
from __future__ import annotations

from datetime import date

import pytest

from src.core.prompts import current_position_placeholder
from src.core.query_builder import build_trip_query
from src.core.schemas import Coordinates, RetrievalConfiguration, TripQuery


def _make_trip(**overrides) -> TripQuery:
    values = {
        "destination": "Annecy",
        "start_date": "2026-06-01",
        "end_date": "2026-06-03",
        "radius_km": 20,
    }
    values.update(overrides)
    return TripQuery(**values)


def test_prompt_mentions_destination_dates_and_radius():
    prompt, config = build_trip_query(_make_trip())

    assert "Annecy" in prompt
    assert "2026-06-01" in prompt
    assert "2026-06-03" in prompt
    assert "20km" in prompt
    assert config.location_bias is None


def test_empty_destination_uses_current_position_placeholder():
    prompt, _ = build_trip_query(_make_trip(destination=""))

    assert current_position_placeholder in prompt
    assert " à  du " not in prompt


def test_whitespace_destination_is_treated_as_empty():
    prompt, _ = build_trip_query(_make_trip(destination="   "))

    assert current_position_placeholder in prompt


@pytest.mark.parametrize(
    "category",
    [
        "Marchés",
        "Brocantes et vide-greniers",
        "Événements locaux et culturels",
        "Escape games",
        "Fêtes de village",
        "Recycleries et ressourceries",
    ],
)
def test_prompt_enumerates_every_activity_category(category):
    prompt, _ = build_trip_query(_make_trip())

    assert category in prompt


def test_prompt_asks_for_day_by_day_answer_and_sources():
    prompt, _ = build_trip_query(_make_trip())

    assert "jour par jour du 2026-06-01 au 2026-06-03" in prompt
    assert "cite tes sources" in prompt


def test_both_grounding_tools_are_always_requested():
    _, config = build_trip_query(_make_trip())

    assert config.maps_grounding is True
    assert config.search_grounding is True


def test_location_bias_is_set_only_with_coordinates():
    coordinates = Coordinates(latitude=45.8992, longitude=6.1294)

    _, with_coords = build_trip_query(_make_trip(coordinates=coordinates))
    _, without_coords = build_trip_query(_make_trip())

    assert with_coords.location_bias == coordinates
    assert without_coords.location_bias is None


def test_build_is_deterministic():
    trip = _make_trip(coordinates=Coordinates(latitude=1.0, longitude=2.0))

    assert build_trip_query(trip) == build_trip_query(trip)


def test_reversed_dates_still_build_a_prompt():
    prompt, config = build_trip_query(
        _make_trip(start_date=date(2026, 6, 3), end_date=date(2026, 6, 1))
    )

    assert "du 2026-06-03 au 2026-06-01" in prompt
    assert isinstance(config, RetrievalConfiguration)
