"""Contract tests for SourceAdapter implementations.

These tests ensure that any implementation of SourceAdapter follows the interface contract.
They can be run against any adapter (MockAdapter, OctopartAdapter with a mocked session, etc.).
"""

import pytest

from parts_etl.source_extractor import PageFetchError, PageRequest, SourceAdapter
from parts_etl.source_extractor.adapters.mock_adapter import MockAdapter
from parts_etl.projector.rules import default_keep


class TestSourceAdapterContract:
    """Contract tests that all SourceAdapter implementations must pass."""

    @pytest.fixture
    def adapter(self) -> SourceAdapter:
        """Provide an adapter instance for testing."""
        return MockAdapter(num_parts=50)

    def test_adapter_has_source_name(self, adapter: SourceAdapter):
        assert isinstance(adapter.source_name, str)
        assert len(adapter.source_name) > 0

    def test_fetch_page_returns_list_of_dicts(self, adapter: SourceAdapter):
        results = adapter.fetch_page("N-Ch", PageRequest(index=0, offset=0, limit=10))

        assert isinstance(results, list)
        assert all(isinstance(record, dict) for record in results)

    def test_fetch_page_respects_limit(self, adapter: SourceAdapter):
        results = adapter.fetch_page("N-Ch", PageRequest(index=0, offset=0, limit=10))
        assert len(results) == 10

    def test_offset_past_total_returns_empty(self, adapter: SourceAdapter):
        results = adapter.fetch_page("N-Ch", PageRequest(index=9, offset=900, limit=100))
        assert results == []

    def test_repr(self, adapter: SourceAdapter):
        assert "MockAdapter" in repr(adapter)
        assert "mock_api" in repr(adapter)


class TestMockAdapter:
    """Tests specific to the mock adapter."""

    def test_pages_are_disjoint(self):
        adapter = MockAdapter(num_parts=30)

        first = adapter.fetch_page("x", PageRequest(index=0, offset=0, limit=10))
        second = adapter.fetch_page("x", PageRequest(index=1, offset=10, limit=10))

        first_mpns = {p["item"]["mpn"] for p in first}
        second_mpns = {p["item"]["mpn"] for p in second}
        assert first_mpns.isdisjoint(second_mpns)

    def test_short_last_page(self):
        adapter = MockAdapter(num_parts=25)
        assert len(adapter.fetch_page("x", PageRequest(index=2, offset=20, limit=10))) == 5

    def test_fail_offsets(self):
        adapter = MockAdapter(num_parts=30, fail_offsets={10})

        with pytest.raises(PageFetchError, match="Simulated API failure"):
            adapter.fetch_page("x", PageRequest(index=1, offset=10, limit=10))

    def test_generated_parts_exercise_keep_predicate(self):
        adapter = MockAdapter(num_parts=10)
        keep = default_keep()

        kept = [p for p in adapter.records if keep(p)]

        # Parts 4 and 9 have no Rds On spec
        assert len(kept) == 8

    def test_requests_are_recorded(self):
        adapter = MockAdapter(num_parts=10)
        page = PageRequest(index=0, offset=0, limit=5)

        adapter.fetch_page("x", page)

        assert adapter.requested == [page]


# ============================================================================
# Mark all tests as unit tests
# ============================================================================

pytestmark = pytest.mark.unit
