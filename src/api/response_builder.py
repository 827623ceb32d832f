from src.api.schemas import SearchStateResponse
from src.core.schemas import SearchFailure, SearchSnapshot, SearchSuccess


def _state_to_response(snapshot: SearchSnapshot) -> SearchStateResponse:
    outcome = snapshot.outcome
    if isinstance(outcome, SearchSuccess):
        return SearchStateResponse(
            phase=snapshot.phase,
            itinerary_text=outcome.itinerary_text,
            sources=outcome.sources,
        )
    if isinstance(outcome, SearchFailure):
        return SearchStateResponse(phase=snapshot.phase, error=outcome.message)
    return SearchStateResponse(phase=snapshot.phase)
