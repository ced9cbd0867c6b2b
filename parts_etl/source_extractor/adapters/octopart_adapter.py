"""
Octopart API Adapter.

This adapter queries the Octopart v3 `parts/search` endpoint, one page
(offset/limit slice) per call.

Query string layout, in order:
    q, start, limit, apikey, include[] (repeated), additional params (verbatim)
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

import requests

from ..base import PageFetchError, PageRequest, RawRecord, SourceAdapter

if TYPE_CHECKING:
    from ...config import SearchConfig

logger = logging.getLogger(__name__)

# Constants
API_TIMEOUT_SECONDS = 30


class OctopartAdapter(SourceAdapter):
    """
    Adapter for the Octopart parts search API.

    The include directives and the extra filter/sort parameters come from the
    search configuration and are passed through without interpretation.
    """

    def __init__(
        self,
        api_key: str,
        search_url: str,
        includes: tuple[str, ...] = (),
        additional_params: tuple[tuple[str, str], ...] = (),
        timeout: float = API_TIMEOUT_SECONDS,
    ):
        """
        Initialize the Octopart adapter.

        Args:
            api_key: Octopart API key
            search_url: Full URL of the search endpoint
            includes: Values for the repeated `include[]` parameter
            additional_params: Extra (name, value) pairs appended verbatim
            timeout: Per-request timeout in seconds
        """
        super().__init__(source_name="octopart")

        if not api_key:
            raise ValueError("Octopart API key must be provided")

        self.api_key = api_key
        self.search_url = search_url.rstrip("?")
        self.includes = tuple(includes)
        self.additional_params = tuple(additional_params)
        self.timeout = timeout

        # Pages are fetched from worker threads
        self._lock = threading.Lock()
        self.api_call_count = 0

    @classmethod
    def from_config(cls, config: SearchConfig) -> "OctopartAdapter":
        return cls(
            api_key=config.api_key,
            search_url=config.search_url,
            includes=config.includes,
            additional_params=config.additional_params,
            timeout=config.request_timeout,
        )

    def build_params(self, term: str, page: PageRequest) -> list[tuple[str, Any]]:
        """Build the ordered query parameters for one page."""
        params: list[tuple[str, Any]] = [
            ("q", term),
            ("start", page.offset),
            ("limit", page.limit),
            ("apikey", self.api_key),
        ]
        params.extend(("include[]", include) for include in self.includes)
        params.extend(self.additional_params)
        return params

    def fetch_page(self, term: str, page: PageRequest) -> list[RawRecord]:
        """
        Fetch one page of search results.

        Args:
            term: Free-text search term
            page: Offset and limit of the slice

        Returns:
            The `results` array of the response

        Raises:
            PageFetchError: On network, HTTP or response-shape errors
        """
        with self._lock:
            self.api_call_count += 1

        logger.debug(
            "Making Octopart API call",
            extra={"offset": page.offset, "limit": page.limit, "term": term},
        )

        try:
            response = requests.get(
                self.search_url, params=self.build_params(term, page), timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise PageFetchError(
                f"Request failed at offset {page.offset}: {e}", offset=page.offset
            ) from e

        # Handle HTTP errors
        if response.status_code == 401:
            raise PageFetchError("Invalid API key - check OCTOPART_API_KEY", offset=page.offset)
        elif response.status_code == 429:
            raise PageFetchError("Rate limit exceeded - too many API calls", offset=page.offset)
        elif response.status_code >= 400:
            raise PageFetchError(
                f"API error {response.status_code}: {response.text}", offset=page.offset
            )

        try:
            data = response.json()
        except ValueError as e:
            raise PageFetchError(
                f"Non-JSON response at offset {page.offset}: {e}", offset=page.offset
            ) from e

        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            raise PageFetchError(
                f"Malformed response at offset {page.offset}: missing results array",
                offset=page.offset,
            )

        logger.info(
            "Octopart API call successful",
            extra={
                "offset": page.offset,
                "status_code": response.status_code,
                "parts_returned": len(results),
                "total_api_calls": self.api_call_count,
            },
        )
        return results

    def __repr__(self) -> str:
        """String representation of the adapter."""
        return (
            f"OctopartAdapter(source='{self.source_name}', "
            f"includes={list(self.includes)}, "
            f"api_calls={self.api_call_count})"
        )
