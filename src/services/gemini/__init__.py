"""Gemini grounded generation integration.

This module wraps the ``google-genai`` SDK for the one call the search needs:
a ``generate_content`` request with Google Maps and Google Search grounding.

Public API:
    - create_genai_client: Factory building the SDK client from settings
    - create_grounded_search_invoker: Factory building the invoker from settings
    - GroundedSearchInvoker: Sends a prompt with its retrieval configuration
    - to_generate_content_config: Translates a RetrievalConfiguration for the SDK
"""
from src.services.gemini.client import (
    GroundedSearchInvoker,
    create_genai_client,
    create_grounded_search_invoker,
    to_generate_content_config,
)

__all__ = [
    "GroundedSearchInvoker",
    "create_genai_client",
    "create_grounded_search_invoker",
    "to_generate_content_config",
]
