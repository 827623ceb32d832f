from src.core.config import ApiSettings
from src.core.orchestrator import SearchOrchestrator
from src.core.schemas import Coordinates, SearchOutcome, TripQuery
from src.services import (
    CoordinateProvider,
    GroundedSearchInvoker,
    create_coordinate_provider,
    create_grounded_search_invoker,
)
from typing import Optional


class SearchBundle:
    """Container for the search orchestrator and its dependencies.

    The bundle is created once per process. It owns:
    - the Gemini invoker, built from the API key read at startup
    - the coordinate provider, queried once when the application starts
    - the orchestrator holding the current search phase and outcome

    Attributes:
        settings: Configuration read from the environment
        invoker: Grounded generation client wrapper
        position: Current position of the searcher, when known
        orchestrator: Single-flight search state machine
    """

    def __init__(
        self,
        settings: ApiSettings,
        *,
        invoker: Optional[GroundedSearchInvoker] = None,
        position: Optional[CoordinateProvider] = None,
    ) -> None:
        self.settings = settings
        self.invoker = invoker or create_grounded_search_invoker(settings)
        self.position = position or create_coordinate_provider(settings)
        self.orchestrator = SearchOrchestrator(self.invoker, self.position)

    def __repr__(self) -> str:
        return (
            f"SearchBundle(\n"
            f"  invoker={self.invoker!r},\n"
            f"  position={self.position.current},\n"
            f"  phase={self.orchestrator.phase.value}\n"
            f")"
        )

    def start(self) -> None:
        """Kick off the one-shot position lookup."""

        self.position.start()

    async def close(self) -> None:
        await self.position.close()

    async def search(self, trip: TripQuery) -> SearchOutcome:
        return await self.orchestrator.submit(trip)

    def clear(self) -> None:
        self.orchestrator.reset()

    def set_position(self, coordinates: Optional[Coordinates]) -> None:
        self.position.update(coordinates)
