"""External service integrations for the local happenings search.

This package provides clients and factories for the external capabilities the
search relies on:

- Gemini: grounded generation with Google Maps and Google Search grounding
- Geolocation: best-effort current position used as a location bias

Each service module exports:
    - create_*: Factory building the service from ApiSettings
    - The service class itself, so callers can inject doubles in tests

Example Usage:
    >>> from src.services.gemini import create_grounded_search_invoker
    >>> from src.core.config import ApiSettings
    >>>
    >>> settings = ApiSettings.from_env()
    >>> invoker = create_grounded_search_invoker(settings)
"""

# Gemini grounded generation
from src.services.gemini import (
    GroundedSearchInvoker,
    create_genai_client,
    create_grounded_search_invoker,
    to_generate_content_config,
)

# Current position
from src.services.geolocation import (
    CoordinateProvider,
    create_coordinate_provider,
    locate_by_ip,
)

__all__ = [
    # Gemini
    "GroundedSearchInvoker",
    "create_genai_client",
    "create_grounded_search_invoker",
    "to_generate_content_config",
    # Geolocation
    "CoordinateProvider",
    "create_coordinate_provider",
    "locate_by_ip",
]
