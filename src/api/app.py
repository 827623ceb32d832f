"""FastAPI surface for the local happenings search."""
from __future__ import annotations

import os
# Load environment variables from .env file
from dotenv import load_dotenv

# Load .env file before any other imports that might need environment variables
load_dotenv()


from typing import Dict, Optional
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
import logging
import sentry_sdk

from src.api.schemas import PositionRequest, SearchRequest, SearchStateResponse
from src.api.dependencies import lifespan, get_search_bundle
from src.api.response_builder import _state_to_response
from src.core.config import ApiSettings
from src.core.errors import SearchInProgressError
from src.core.schemas import Coordinates

logger = logging.getLogger(__name__)

if os.getenv("SENTRY_DSN"):  # pragma: no cover - runtime configuration
    sentry_sdk.init(
        dsn=os.getenv("SENTRY_DSN"),
        enable_logs=True,
        send_default_pii=False,
        traces_sample_rate=1.0,
    )

app = FastAPI(title="Escapade Locale API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ApiSettings.from_env().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/search", response_model=SearchStateResponse)
async def search(payload: SearchRequest) -> SearchStateResponse:
    """Search local happenings for a stay and return the settled result.

    The answer is generated with Google Maps and Google Search grounding and
    organised day by day. The request returns once the search has succeeded or
    failed; a failed search is still a 200 response with ``phase="failed"``.

    Args:
        payload: Destination (empty for "around me"), stay dates, radius in km
                 and an optional position overriding the stored one.

    Returns:
        SearchStateResponse containing:
        - phase: "succeeded" or "failed"
        - itinerary_text: Markdown answer when the search succeeded
        - sources: Places and web pages that grounded the answer
        - error: User-facing message when the search failed

    Raises:
        HTTPException: 409 while another search is running, 500 for unexpected errors

    Example JSON payload:
        ```json
        {
            "destination": "Annecy",
            "start_date": "2026-06-01",
            "end_date": "2026-06-03",
            "radius_km": 20
        }
        ```
    """

    logger.info("Starting new search request")
    logger.info(f"Destination: {payload.destination or '<current position>'}, radius {payload.radius_km}km")
    logger.info(f"Stay dates: {payload.start_date} to {payload.end_date}")

    bundle = get_search_bundle()
    try:
        await bundle.search(payload.to_trip_query())
    except SearchInProgressError as exc:
        logger.warning(f"Rejected search while another is running: {str(exc)}")
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except Exception as exc:
        logger.error(f"Unexpected error during search: {str(exc)}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return _state_to_response(bundle.orchestrator.snapshot())


@app.get("/search", response_model=SearchStateResponse)
async def search_state() -> SearchStateResponse:
    """Return the current search phase and result."""

    return _state_to_response(get_search_bundle().orchestrator.snapshot())


@app.delete("/search", response_model=SearchStateResponse)
async def clear_search() -> SearchStateResponse:
    """Clear the displayed result and go back to idle."""

    bundle = get_search_bundle()
    try:
        bundle.clear()
    except SearchInProgressError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return _state_to_response(bundle.orchestrator.snapshot())


@app.post("/position", response_model=Optional[Coordinates])
async def set_position(payload: PositionRequest) -> Optional[Coordinates]:
    """Store the device position reported by the client."""

    bundle = get_search_bundle()
    bundle.set_position(payload.coordinates)
    return bundle.position.current


@app.get("/position", response_model=Optional[Coordinates])
async def get_position() -> Optional[Coordinates]:
    """Return the current position, or null when it is unknown."""

    return get_search_bundle().position.current


@app.get("/health")
async def health_check() -> Dict[str, str]:
    """Simple health endpoint used for readiness checks."""

    return {"status": "healthy", "service": "escapade-locale-api"}
