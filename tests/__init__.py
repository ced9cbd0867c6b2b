"""Parts Search ETL Test Suite.

This package contains unit tests for the parts search pipeline.

Test Structure:
- unit/: Unit tests for individual functions and classes
"""

__version__ = "0.1.0"
