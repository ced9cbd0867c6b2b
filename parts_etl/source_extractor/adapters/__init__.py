"""Parts Search API Adapters.

This package contains concrete implementations of the SourceAdapter interface.

Available adapters:
- MockAdapter: For testing and offline runs (mock_adapter.py)
- OctopartAdapter: Octopart v3 parts search (octopart_adapter.py)
"""

from .mock_adapter import MockAdapter
from .octopart_adapter import OctopartAdapter

__all__ = ["MockAdapter", "OctopartAdapter"]
