"""
Paginated bulk fetch.

Splits a search into fixed offset/limit pages, fetches them concurrently on a
bounded worker pool and joins the results back together in offset order.

Failure policy when a page cannot be fetched:
- "empty":   the whole fetch yields no records (nothing partial reaches the output)
- "partial": the pages that did succeed are kept, in offset order
Either way the returned FetchResult says which offsets are missing.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from .base import PageFetchError, PageRequest, RawRecord, SourceAdapter

if TYPE_CHECKING:
    from ..config import SearchConfig

logger = logging.getLogger(__name__)

STATUS_COMPLETE = "complete"
STATUS_PARTIAL = "partial"
STATUS_FAILED = "failed"


@dataclass
class FetchResult:
    """Outcome of a paginated fetch."""

    status: str
    records: list[RawRecord] = field(default_factory=list)
    missing_offsets: list[int] = field(default_factory=list)
    pages_requested: int = 0

    @property
    def is_complete(self) -> bool:
        return self.status == STATUS_COMPLETE


def plan_pages(max_results: int, page_size: int) -> list[PageRequest]:
    """
    Build the page requests covering ``[0, max_results)``.

    There are ``ceil(max_results / page_size)`` pages at offsets
    0, page_size, 2*page_size, ... The last page's limit is trimmed so that
    no more than ``max_results`` records can be requested in total.

    Raises:
        ValueError: If either argument is not a positive integer
    """
    if max_results < 1 or page_size < 1:
        raise ValueError("max_results and page_size must be positive")

    pages = []
    for index in range(math.ceil(max_results / page_size)):
        offset = index * page_size
        pages.append(
            PageRequest(index=index, offset=offset, limit=min(page_size, max_results - offset))
        )
    return pages


def fetch_all(
    term: str,
    config: SearchConfig,
    adapter: Optional[SourceAdapter] = None,
) -> FetchResult:
    """
    Fetch every page for ``term`` and concatenate the results in offset order.

    Args:
        term: Free-text search term
        config: Search configuration (paging, concurrency, failure policy)
        adapter: Source to fetch from. Defaults to an OctopartAdapter built
            from ``config``.

    Returns:
        FetchResult. ``records`` follows ``config.on_page_error`` when any
        page is missing.
    """
    if adapter is None:
        from .adapters.octopart_adapter import OctopartAdapter

        adapter = OctopartAdapter.from_config(config)

    pages = plan_pages(config.max_results, config.page_size)
    start_time = datetime.now(timezone.utc)

    logger.info(
        "Starting paginated fetch",
        extra={
            "source": adapter.source_name,
            "term": term,
            "pages": len(pages),
            "page_size": config.page_size,
            "max_results": config.max_results,
            "max_concurrent_queries": config.max_concurrent_queries,
        },
    )

    # Buffer per page index; assembly happens after the join
    page_results: dict[int, list[RawRecord]] = {}
    missing: list[int] = []

    with ThreadPoolExecutor(max_workers=config.max_concurrent_queries) as executor:
        futures = {executor.submit(adapter.fetch_page, term, page): page for page in pages}

        for future in as_completed(futures):
            page = futures[future]
            try:
                page_results[page.index] = list(future.result())
            except PageFetchError as e:
                missing.append(page.offset)
                logger.error(
                    "Failed to fetch page",
                    extra={"offset": page.offset, "error": str(e), "error_type": type(e).__name__},
                )
            except Exception as e:
                missing.append(page.offset)
                logger.error(
                    "Unexpected error fetching page",
                    extra={"offset": page.offset, "error": str(e), "error_type": type(e).__name__},
                    exc_info=True,
                )

    records: list[RawRecord] = []
    for page in pages:
        records.extend(page_results.get(page.index, []))

    missing.sort()
    if not missing:
        status = STATUS_COMPLETE
    elif len(missing) == len(pages):
        status = STATUS_FAILED
    else:
        status = STATUS_PARTIAL

    if missing and config.on_page_error == "empty":
        logger.warning(
            "Discarding fetched records because pages are missing",
            extra={"missing_offsets": missing, "discarded": len(records)},
        )
        records = []

    duration = (datetime.now(timezone.utc) - start_time).total_seconds()
    logger.info(
        "Paginated fetch completed",
        extra={
            "status": status,
            "records": len(records),
            "missing_pages": len(missing),
            "duration_seconds": duration,
        },
    )

    return FetchResult(
        status=status,
        records=records,
        missing_offsets=missing,
        pages_requested=len(pages),
    )
