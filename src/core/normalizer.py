"""Normalise a grounded generation response into a :class:`SearchOutcome`.

The provider payload is loosely typed: the candidate list, its grounding
metadata and the chunk list may each be missing, and every chunk carries either
a ``maps`` or a ``web`` record (or neither). Responses may arrive as SDK objects
(snake_case attributes) or as decoded JSON (camelCase keys); both are read the
same way.
"""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Sequence

from src.core.prompts import no_activities_message
from src.core.schemas import (
    PlaceChunk,
    RawGroundingChunk,
    SearchFailure,
    SearchOutcome,
    SearchSuccess,
    SourceReference,
    UnrecognizedChunk,
    WebChunk,
)

logger = logging.getLogger(__name__)

NO_ACTIVITIES_MESSAGE = no_activities_message
MALFORMED_RESPONSE_MESSAGE = "La réponse du service de recherche est illisible."


class MalformedResponseError(ValueError):
    """The response cannot be interpreted at all."""


def _field(obj: Any, *names: str) -> Any:
    """Read the first present attribute or key among ``names``; ``None`` if absent."""

    if obj is None:
        return None
    for name in names:
        if isinstance(obj, Mapping):
            value = obj.get(name)
        else:
            value = getattr(obj, name, None)
        if value is not None:
            return value
    return None


def _text(obj: Any, name: str) -> Optional[str]:
    value = _field(obj, name)
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return None


def _sequence(value: Any, label: str) -> Sequence[Any]:
    if value is None:
        return []
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
        raise MalformedResponseError(f"Expected a list for {label}, got {type(value).__name__}")
    return value


def extract_answer_text(response: Any) -> str:
    """Return the answer text, or the fallback message when there is none."""

    text = _field(response, "text")
    if text is None:
        return NO_ACTIVITIES_MESSAGE
    if not isinstance(text, str):
        raise MalformedResponseError(f"Expected answer text, got {type(text).__name__}")
    return text or NO_ACTIVITIES_MESSAGE


def extract_grounding_chunks(response: Any) -> Sequence[Any]:
    """Return ``candidates[0].grounding_metadata.grounding_chunks`` or ``[]``.

    Each link of the chain is checked in turn; the first missing one ends the
    lookup with an empty list.
    """

    candidates = _sequence(_field(response, "candidates"), "candidates")
    if not candidates:
        return []
    metadata = _field(candidates[0], "grounding_metadata", "groundingMetadata")
    if metadata is None:
        return []
    chunks = _field(metadata, "grounding_chunks", "groundingChunks")
    return _sequence(chunks, "grounding chunks")


def classify_chunk(chunk: Any) -> RawGroundingChunk:
    """Tag a raw chunk as a place, a web page or unrecognized."""

    maps = _field(chunk, "maps")
    if maps is not None:
        return PlaceChunk(title=_text(maps, "title"), uri=_text(maps, "uri"))
    web = _field(chunk, "web")
    if web is not None:
        return WebChunk(title=_text(web, "title"), uri=_text(web, "uri"))
    return UnrecognizedChunk(payload=chunk)


def to_source_reference(chunk: RawGroundingChunk) -> Optional[SourceReference]:
    """Map a classified chunk to a source; ``None`` when it cannot be linked."""

    if isinstance(chunk, (PlaceChunk, WebChunk)):
        if not chunk.uri:
            return None
        return SourceReference(kind=chunk.kind, title=chunk.title or chunk.uri, uri=chunk.uri)
    return None


def extract_sources(raw_chunks: Sequence[Any]) -> List[SourceReference]:
    sources: List[SourceReference] = []
    for idx, raw in enumerate(raw_chunks):
        chunk = classify_chunk(raw)
        source = to_source_reference(chunk)
        if source is None:
            logger.debug("Dropping grounding chunk at position %s (kind=%s)", idx, chunk.kind)
            continue
        sources.append(source)
    return sources


def normalize_response(response: Any) -> SearchOutcome:
    """Build the search outcome from a grounded generation response.

    Missing text, candidates or metadata never fail: they produce the fallback
    text and an empty source list. Only a response whose shape cannot be read
    at all becomes a :class:`SearchFailure`.
    """

    try:
        itinerary_text = extract_answer_text(response)
        sources = extract_sources(extract_grounding_chunks(response))
    except Exception as exc:
        logger.error("Could not normalise grounded response: %s", exc, exc_info=True)
        return SearchFailure(message=MALFORMED_RESPONSE_MESSAGE)

    logger.info("Normalised grounded response with %s sources", len(sources))
    return SearchSuccess(itinerary_text=itinerary_text, sources=sources)
