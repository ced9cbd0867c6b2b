"""Source Adapter Base Class.

This module defines the abstract interface that all parts-search API adapters must implement.
The fetcher only talks to this interface, so a new provider (or an offline test double)
can be plugged in without touching the pagination logic.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List

# One matched part as returned by the remote service. Its shape is defined by
# the provider, so it is treated as an opaque, read-only mapping.
RawRecord = Dict[str, Any]


class PageFetchError(Exception):
    """Raised when a single page cannot be fetched or parsed."""

    def __init__(self, message: str, offset: int | None = None):
        super().__init__(message)
        self.offset = offset


@dataclass(frozen=True)
class PageRequest:
    """One bounded slice of a paginated query.

    Page ``index`` covers offsets ``[offset, offset + limit)``.
    """

    index: int
    offset: int
    limit: int


class SourceAdapter(ABC):
    """Abstract base class for parts-search API adapters.

    Usage:
        class MyProviderAdapter(SourceAdapter):
            def __init__(self, api_key: str):
                super().__init__(source_name="my_provider")
                self.api_key = api_key

            def fetch_page(self, term, page):
                # Issue one request for page.offset / page.limit
                ...
    """

    def __init__(self, source_name: str):
        """Initialize the adapter.

        Args:
            source_name: Unique identifier for this data source
                        (e.g., "octopart", "mock_api")
        """
        self.source_name = source_name

    @abstractmethod
    def fetch_page(self, term: str, page: PageRequest) -> List[RawRecord]:
        """Fetch a single page of search results.

        Implementations must be safe to call from several threads at once,
        since the fetcher dispatches pages concurrently.

        Args:
            term: Free-text search term
            page: Offset and limit of the slice to fetch

        Returns:
            The page's results array. It may be shorter than ``page.limit``
            (last page) or empty (offset past the true total).

        Raises:
            PageFetchError: On network errors, HTTP errors, non-JSON bodies
                or a response without a results array
        """
        pass

    def __repr__(self) -> str:
        """String representation of the adapter."""
        return f"{self.__class__.__name__}(source='{self.source_name}')"
