"""Reference search across a project's text files.

Runs the platform search tool (grep or findstr) once per root directory
and file extension, then sorts the hits into tracked assets and
unresolved paths.
"""

from .backends import (
    FindstrBackend,
    GrepBackend,
    SearchBackend,
    check_backend_available,
    default_backend,
)
from .finder import ReferenceFinder
from .models import MAX_RESULTS, MIN_SEARCH_LENGTH, SearchRequest, SearchResult
from .orchestrator import make_request, search

__all__ = [
    "SearchRequest",
    "SearchResult",
    "MAX_RESULTS",
    "MIN_SEARCH_LENGTH",
    "search",
    "make_request",
    "ReferenceFinder",
    "SearchBackend",
    "GrepBackend",
    "FindstrBackend",
    "default_backend",
    "check_backend_available",
]
