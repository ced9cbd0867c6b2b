"""Mock Adapter for Testing.

This adapter simulates the parts search API for tests and offline runs.
It doesn't make real HTTP requests, but follows the same page contract.
"""

import threading
from typing import Any, Iterable, Optional, Sequence

from ..base import PageFetchError, PageRequest, RawRecord, SourceAdapter


class MockAdapter(SourceAdapter):
    """Mock adapter that serves slices of a fixed record list.

    Useful for:
    - Unit testing without hitting the real API
    - Testing the page failure policy (``fail_offsets``)

    Example:
        adapter = MockAdapter(num_parts=250)
        page = adapter.fetch_page("N-Ch", PageRequest(index=2, offset=200, limit=100))
        assert len(page) == 50
    """

    def __init__(
        self,
        records: Optional[Sequence[RawRecord]] = None,
        num_parts: int = 100,
        fail_offsets: Iterable[int] = (),
    ):
        """Initialize the mock adapter.

        Args:
            records: Records to serve. Fake MOSFET parts are generated if omitted.
            num_parts: Number of fake parts to generate when ``records`` is None
            fail_offsets: Offsets whose page request raises PageFetchError
        """
        super().__init__(source_name="mock_api")
        self.records = (
            list(records) if records is not None
            else [self._generate_fake_part(i) for i in range(num_parts)]
        )
        self.fail_offsets = set(fail_offsets)

        self._lock = threading.Lock()
        self.requested: list[PageRequest] = []

    def fetch_page(self, term: str, page: PageRequest) -> list[RawRecord]:
        """Return ``records[offset:offset + limit]``."""
        with self._lock:
            self.requested.append(page)

        if page.offset in self.fail_offsets:
            raise PageFetchError(
                f"Simulated API failure at offset {page.offset}", offset=page.offset
            )

        return self.records[page.offset:page.offset + page.limit]

    def _generate_fake_part(self, index: int) -> dict[str, Any]:
        """Generate a fake search result shaped like an Octopart part.

        Every fifth part lacks an Rds On spec so the default keep predicate
        has something to drop.
        """
        manufacturers = ["Vishay", "Infineon", "onsemi", "Nexperia", "Toshiba"]
        manufacturer = manufacturers[index % len(manufacturers)]

        specs: dict[str, Any] = {
            "breakdown_voltage_drain_to_source": {"value": [str(20 + (index * 10) % 580)]},
        }
        if index % 5 != 4:
            specs["rds_drain_to_source_resistance_on"] = {
                "value": [f"{0.001 * (1 + index % 50):.3f}"]
            }

        return {
            "snippet": f"N-Channel MOSFET from {manufacturer}",
            "item": {
                "mpn": f"MOCK-{index:05d}",
                "octopart_url": f"https://octopart.com/mock-{index}",
                "manufacturer": {"name": manufacturer},
                "datasheets": [{"url": f"https://example.com/datasheets/{index}.pdf"}],
                "specs": specs,
            },
        }
