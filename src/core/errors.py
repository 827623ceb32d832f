"""Exceptions raised by the search workflow."""
from __future__ import annotations


class GroundedSearchError(RuntimeError):
    """Any failure of the grounded generation call.

    Missing credentials, transport problems and errors reported by the
    provider all surface as this one type.
    """


class SearchInProgressError(RuntimeError):
    """Raised when a search is submitted while another one is still running."""
