"""Search cycle state machine.

One cycle runs ``idle -> searching -> succeeded | failed``. A new submission
from ``succeeded`` or ``failed`` goes straight back to ``searching``.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional, Protocol

from src.core.errors import SearchInProgressError
from src.core.normalizer import normalize_response
from src.core.prompts import search_failed_message
from src.core.query_builder import build_trip_query
from src.core.schemas import (
    Coordinates,
    RetrievalConfiguration,
    SearchFailure,
    SearchOutcome,
    SearchPhase,
    SearchSnapshot,
    SearchSuccess,
    TripQuery,
)

logger = logging.getLogger(__name__)

SEARCH_FAILED_MESSAGE = search_failed_message


class SearchInvoker(Protocol):
    async def invoke(self, prompt: str, retrieval: RetrievalConfiguration) -> Any: ...


class PositionSource(Protocol):
    @property
    def current(self) -> Optional[Coordinates]: ...


class SearchOrchestrator:
    """Runs one grounded search at a time and keeps its outcome.

    A submission while a search is in flight is rejected with
    :class:`SearchInProgressError`. The phase check and the switch to
    ``searching`` happen before the first ``await``, so two submissions on the
    same event loop can never both pass it.
    """

    def __init__(
        self,
        invoker: SearchInvoker,
        position: Optional[PositionSource] = None,
        normalizer: Callable[[Any], SearchOutcome] = normalize_response,
    ) -> None:
        self._invoker = invoker
        self._position = position
        self._normalize = normalizer
        self.phase = SearchPhase.IDLE
        self.outcome: Optional[SearchOutcome] = None

    @property
    def is_searching(self) -> bool:
        return self.phase is SearchPhase.SEARCHING

    def _with_position(self, trip: TripQuery) -> TripQuery:
        if trip.coordinates is not None or self._position is None:
            return trip
        current = self._position.current
        if current is None:
            return trip
        return trip.model_copy(update={"coordinates": current})

    def _settle(self, outcome: SearchOutcome) -> SearchOutcome:
        self.outcome = outcome
        if isinstance(outcome, SearchSuccess):
            self.phase = SearchPhase.SUCCEEDED
            logger.info("Search succeeded with %s sources", len(outcome.sources))
        else:
            self.phase = SearchPhase.FAILED
            logger.info("Search failed: %s", outcome.message)
        return outcome

    async def submit(self, trip: TripQuery) -> SearchOutcome:
        """Run a full search cycle and return its outcome."""

        if self.is_searching:
            raise SearchInProgressError("A search is already in progress.")

        self.phase = SearchPhase.SEARCHING
        self.outcome = None

        trip = self._with_position(trip)
        logger.info(
            f"Searching activities for '{trip.destination or '<current position>'}' "
            f"from {trip.start_date} to {trip.end_date} within {trip.radius_km}km"
        )

        try:
            prompt, retrieval = build_trip_query(trip)
            logger.debug("Prompt: %s", prompt)
            response = await self._invoker.invoke(prompt, retrieval)
            outcome = self._normalize(response)
        except asyncio.CancelledError:
            self._settle(SearchFailure(message=SEARCH_FAILED_MESSAGE))
            raise
        except Exception as exc:
            logger.error(f"Search error: {str(exc)}", exc_info=True)
            outcome = SearchFailure(message=SEARCH_FAILED_MESSAGE)

        return self._settle(outcome)

    def snapshot(self) -> SearchSnapshot:
        """Return the current phase and outcome together."""

        return SearchSnapshot(phase=self.phase, outcome=self.outcome)

    def reset(self) -> None:
        """Clear the current outcome and go back to ``idle``."""

        if self.is_searching:
            raise SearchInProgressError("Cannot clear results while a search is in progress.")
        self.phase = SearchPhase.IDLE
        self.outcome = None
