"""Source Extractor Service.

This service is responsible for fetching parts search results from external
APIs, one page at a time, and joining them into a single ordered record list.

Main components:
- SourceAdapter: Abstract base class for all data source adapters
- PageRequest: One offset/limit slice of a paginated query
- fetch_all: Concurrent paginated fetch returning a FetchResult
- Adapters: Provider-specific implementations (in adapters/ directory)
"""

from .base import PageFetchError, PageRequest, RawRecord, SourceAdapter
from .fetcher import FetchResult, fetch_all, plan_pages

__all__ = [
    "FetchResult",
    "PageFetchError",
    "PageRequest",
    "RawRecord",
    "SourceAdapter",
    "fetch_all",
    "plan_pages",
]
