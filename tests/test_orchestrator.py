"""Tests for the single-flight search state machine."""
from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any, List, Optional, Tuple

import pytest
from pydantic import ValidationError

from src.core.errors import GroundedSearchError, SearchInProgressError
from src.core.normalizer import NO_ACTIVITIES_MESSAGE
from src.core.orchestrator import SEARCH_FAILED_MESSAGE, SearchOrchestrator
from src.core.schemas import (
    Coordinates,
    RetrievalConfiguration,
    SearchFailure,
    SearchPhase,
    SearchSnapshot,
    SearchSuccess,
    TripQuery,
)


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class StubInvoker:
    """Records calls and returns a preconfigured response or error."""

    def __init__(self, response: Any = None, error: Optional[Exception] = None) -> None:
        self.response = response
        self.error = error
        self.calls: List[Tuple[str, RetrievalConfiguration]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.release = asyncio.Event()
        self.release.set()

    async def invoke(self, prompt: str, retrieval: RetrievalConfiguration) -> Any:
        self.calls.append((prompt, retrieval))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await self.release.wait()
            if self.error is not None:
                raise self.error
            return self.response
        finally:
            self.in_flight -= 1


class StubPosition:
    def __init__(self, coordinates: Optional[Coordinates]) -> None:
        self.current = coordinates


def _grounded_response() -> SimpleNamespace:
    chunks = [
        SimpleNamespace(maps=SimpleNamespace(title="Marché couvert", uri="https://maps.google.com/?cid=1")),
        SimpleNamespace(web=SimpleNamespace(title="Office de tourisme", uri="https://lac-annecy.com")),
    ]
    return SimpleNamespace(
        text="Day 1: ...",
        candidates=[SimpleNamespace(grounding_metadata=SimpleNamespace(grounding_chunks=chunks))],
    )


def _trip(**overrides) -> TripQuery:
    values = {
        "destination": "Annecy",
        "start_date": "2026-06-01",
        "end_date": "2026-06-03",
        "radius_km": 20,
    }
    values.update(overrides)
    return TripQuery(**values)


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


def test_starts_idle():
    orchestrator = SearchOrchestrator(StubInvoker())

    assert orchestrator.phase is SearchPhase.IDLE
    assert orchestrator.outcome is None


@pytest.mark.asyncio
async def test_annecy_scenario_succeeds():
    invoker = StubInvoker(response=_grounded_response())
    orchestrator = SearchOrchestrator(invoker)

    outcome = await orchestrator.submit(_trip())

    assert orchestrator.phase is SearchPhase.SUCCEEDED
    assert isinstance(outcome, SearchSuccess)
    assert outcome.itinerary_text == "Day 1: ..."
    assert [source.kind for source in outcome.sources] == ["place", "web"]

    prompt, retrieval = invoker.calls[0]
    assert "Annecy" in prompt and "2026-06-01" in prompt and "2026-06-03" in prompt
    assert retrieval.location_bias is None


@pytest.mark.asyncio
async def test_invoker_error_moves_to_failed():
    orchestrator = SearchOrchestrator(StubInvoker(error=GroundedSearchError("quota exceeded")))

    outcome = await orchestrator.submit(_trip())

    assert orchestrator.phase is SearchPhase.FAILED
    assert outcome == SearchFailure(message=SEARCH_FAILED_MESSAGE)


@pytest.mark.asyncio
async def test_unexpected_invoker_error_moves_to_failed():
    orchestrator = SearchOrchestrator(StubInvoker(error=ConnectionError("network down")))

    outcome = await orchestrator.submit(_trip())

    assert orchestrator.phase is SearchPhase.FAILED
    assert isinstance(outcome, SearchFailure)


@pytest.mark.asyncio
async def test_normalizer_failure_moves_to_failed():
    orchestrator = SearchOrchestrator(
        StubInvoker(response=SimpleNamespace(text=42)),
    )

    outcome = await orchestrator.submit(_trip())

    assert orchestrator.phase is SearchPhase.FAILED
    assert isinstance(outcome, SearchFailure)


@pytest.mark.asyncio
async def test_normalizer_exception_is_caught():
    def exploding_normalizer(response):
        raise KeyError("boom")

    orchestrator = SearchOrchestrator(StubInvoker(response={}), normalizer=exploding_normalizer)

    outcome = await orchestrator.submit(_trip())

    assert orchestrator.phase is SearchPhase.FAILED
    assert outcome.message == SEARCH_FAILED_MESSAGE


@pytest.mark.asyncio
async def test_empty_response_is_a_success_with_fallback():
    orchestrator = SearchOrchestrator(StubInvoker(response=SimpleNamespace(text=None, candidates=None)))

    outcome = await orchestrator.submit(_trip())

    assert orchestrator.phase is SearchPhase.SUCCEEDED
    assert outcome.itinerary_text == NO_ACTIVITIES_MESSAGE
    assert outcome.sources == []


@pytest.mark.asyncio
async def test_second_submission_while_searching_is_rejected():
    invoker = StubInvoker(response=_grounded_response())
    invoker.release.clear()
    orchestrator = SearchOrchestrator(invoker)

    first = asyncio.create_task(orchestrator.submit(_trip()))
    await asyncio.sleep(0)
    assert orchestrator.phase is SearchPhase.SEARCHING

    with pytest.raises(SearchInProgressError):
        await orchestrator.submit(_trip(destination="Lyon"))

    invoker.release.set()
    outcome = await first

    assert isinstance(outcome, SearchSuccess)
    assert len(invoker.calls) == 1
    assert invoker.max_in_flight == 1


@pytest.mark.asyncio
async def test_new_submission_clears_previous_result_immediately():
    invoker = StubInvoker(response=_grounded_response())
    orchestrator = SearchOrchestrator(invoker)
    await orchestrator.submit(_trip())
    assert orchestrator.outcome is not None

    invoker.release.clear()
    pending = asyncio.create_task(orchestrator.submit(_trip()))
    await asyncio.sleep(0)

    assert orchestrator.phase is SearchPhase.SEARCHING
    assert orchestrator.outcome is None

    invoker.release.set()
    await pending
    assert orchestrator.phase is SearchPhase.SUCCEEDED


@pytest.mark.asyncio
async def test_failed_search_can_be_retried_directly():
    invoker = StubInvoker(error=GroundedSearchError("missing key"))
    orchestrator = SearchOrchestrator(invoker)
    await orchestrator.submit(_trip())
    assert orchestrator.phase is SearchPhase.FAILED

    invoker.error = None
    invoker.response = _grounded_response()
    await orchestrator.submit(_trip())

    assert orchestrator.phase is SearchPhase.SUCCEEDED
    assert len(invoker.calls) == 2


@pytest.mark.asyncio
async def test_current_position_is_used_as_location_bias():
    coordinates = Coordinates(latitude=45.9, longitude=6.12)
    invoker = StubInvoker(response=_grounded_response())
    orchestrator = SearchOrchestrator(invoker, StubPosition(coordinates))

    await orchestrator.submit(_trip(destination=""))

    _, retrieval = invoker.calls[0]
    assert retrieval.location_bias == coordinates


@pytest.mark.asyncio
async def test_explicit_coordinates_win_over_current_position():
    explicit = Coordinates(latitude=48.85, longitude=2.35)
    invoker = StubInvoker(response=_grounded_response())
    orchestrator = SearchOrchestrator(invoker, StubPosition(Coordinates(latitude=45.9, longitude=6.12)))

    await orchestrator.submit(_trip(coordinates=explicit))

    _, retrieval = invoker.calls[0]
    assert retrieval.location_bias == explicit


@pytest.mark.asyncio
async def test_unknown_position_means_no_bias():
    invoker = StubInvoker(response=_grounded_response())
    orchestrator = SearchOrchestrator(invoker, StubPosition(None))

    await orchestrator.submit(_trip())

    _, retrieval = invoker.calls[0]
    assert retrieval.location_bias is None


@pytest.mark.asyncio
async def test_reset_returns_to_idle():
    orchestrator = SearchOrchestrator(StubInvoker(response=_grounded_response()))
    await orchestrator.submit(_trip())

    orchestrator.reset()

    assert orchestrator.phase is SearchPhase.IDLE
    assert orchestrator.outcome is None


@pytest.mark.asyncio
async def test_reset_is_rejected_while_searching():
    invoker = StubInvoker(response=_grounded_response())
    invoker.release.clear()
    orchestrator = SearchOrchestrator(invoker)
    pending = asyncio.create_task(orchestrator.submit(_trip()))
    await asyncio.sleep(0)

    with pytest.raises(SearchInProgressError):
        orchestrator.reset()

    invoker.release.set()
    await pending


def test_snapshot_of_idle_orchestrator():
    orchestrator = SearchOrchestrator(StubInvoker())

    assert orchestrator.snapshot() == SearchSnapshot(phase=SearchPhase.IDLE)


@pytest.mark.asyncio
async def test_snapshot_reports_phase_and_outcome_together():
    orchestrator = SearchOrchestrator(StubInvoker(response=_grounded_response()))
    outcome = await orchestrator.submit(_trip())

    snapshot = orchestrator.snapshot()

    assert snapshot.phase is SearchPhase.SUCCEEDED
    assert snapshot.outcome == outcome


@pytest.mark.asyncio
async def test_snapshot_is_not_affected_by_later_transitions():
    orchestrator = SearchOrchestrator(StubInvoker(error=GroundedSearchError("quota exceeded")))
    await orchestrator.submit(_trip())
    snapshot = orchestrator.snapshot()

    orchestrator.reset()

    assert snapshot.phase is SearchPhase.FAILED
    assert snapshot.outcome == SearchFailure(message=SEARCH_FAILED_MESSAGE)
    with pytest.raises(ValidationError):
        snapshot.phase = SearchPhase.IDLE
