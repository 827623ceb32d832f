"""Grounded generation through the Gemini API."""
from __future__ import annotations

import logging
from typing import Optional

from google import genai
from google.genai import types

from src.core.config import ApiSettings
from src.core.errors import GroundedSearchError
from src.core.schemas import RetrievalConfiguration

logger = logging.getLogger(__name__)


def create_genai_client(settings: ApiSettings) -> Optional[genai.Client]:
    """Create the Gemini client once at startup.

    Returns ``None`` when no API key is configured; the missing credential is
    reported on the first search instead of preventing startup.
    """

    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set; searches will fail until it is configured")
        return None
    return genai.Client(api_key=settings.gemini_api_key)


def to_generate_content_config(retrieval: RetrievalConfiguration) -> types.GenerateContentConfig:
    """Translate the retrieval configuration into the SDK request config.

    No ``response_schema`` or JSON MIME type is set: the API rejects structured
    output when map grounding is enabled.
    """

    tools = []
    if retrieval.maps_grounding:
        tools.append(types.Tool(google_maps=types.GoogleMaps()))
    if retrieval.search_grounding:
        tools.append(types.Tool(google_search=types.GoogleSearch()))

    tool_config = None
    if retrieval.location_bias is not None:
        tool_config = types.ToolConfig(
            retrieval_config=types.RetrievalConfig(
                lat_lng=types.LatLng(
                    latitude=retrieval.location_bias.latitude,
                    longitude=retrieval.location_bias.longitude,
                )
            )
        )

    return types.GenerateContentConfig(tools=tools, tool_config=tool_config)


class GroundedSearchInvoker:
    """Send one grounded generation request and return the raw response.

    There is no retry, timeout handling or streaming. Every failure, including
    a missing API key, is raised as :class:`GroundedSearchError`.
    """

    def __init__(self, client: Optional[genai.Client], settings: ApiSettings) -> None:
        self._client = client
        self.settings = settings
        self.model = settings.gemini_model

    def __repr__(self) -> str:
        return f"GroundedSearchInvoker(model='{self.model}', configured={self._client is not None})"

    async def invoke(
        self,
        prompt: str,
        retrieval: RetrievalConfiguration,
    ) -> types.GenerateContentResponse:
        try:
            self.settings.ensure("gemini_api_key")
        except RuntimeError as exc:
            logger.error(f"Grounded generation is not configured: {str(exc)}")
            raise GroundedSearchError(str(exc)) from exc

        config = to_generate_content_config(retrieval)
        logger.info(
            "Calling %s (maps=%s, search=%s, location_bias=%s)",
            self.model,
            retrieval.maps_grounding,
            retrieval.search_grounding,
            retrieval.location_bias is not None,
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except Exception as exc:
            logger.error(f"Grounded generation failed: {str(exc)}")
            raise GroundedSearchError(str(exc)) from exc

        logger.debug("Grounded generation response: %s", response)
        return response


def create_grounded_search_invoker(settings: ApiSettings) -> GroundedSearchInvoker:
    return GroundedSearchInvoker(create_genai_client(settings), settings)
