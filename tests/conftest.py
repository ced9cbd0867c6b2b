"""
Pytest configuration and shared fixtures

This file contains test fixtures that can be used across all tests.
Fixtures are reusable components that set up test preconditions.

Learn more: https://docs.pytest.org/en/stable/fixture.html
"""

import pytest

from parts_etl.config import SearchConfig


@pytest.fixture(scope="function")
def search_config() -> SearchConfig:
    """
    Provide a search configuration for 3 pages of 100 results.

    Scope: function (created fresh for each test)
    """
    return SearchConfig(
        search_term="N-Ch",
        api_key="test-key",
        page_size=100,
        max_results=300,
        max_concurrent_queries=3,
        search_url="http://octopart.test/api/v3/parts/search",
    )


@pytest.fixture(scope="function")
def sample_part() -> dict:
    """
    Provide a single search result shaped like an Octopart part.

    Returns:
        dict: Raw part record with both MOSFET specs present
    """
    return {
        "snippet": "N-Channel 60 V 30A\nPower MOSFET",
        "item": {
            "mpn": "IRLZ44N",
            "octopart_url": "https://octopart.com/irlz44n",
            "datasheets": [
                {"url": "https://example.com/irlz44n.pdf"},
                {"url": "https://example.com/irlz44n-alt.pdf"},
            ],
            "specs": {
                "rds_drain_to_source_resistance_on": {"value": ["0.022"]},
                "breakdown_voltage_drain_to_source": {"value": ["55"]},
            },
        },
    }


@pytest.fixture(scope="function")
def sample_part_batch(sample_part) -> list[dict]:
    """
    Provide a batch of parts where the middle one lacks the Rds On spec.

    Returns:
        list[dict]: Three raw part records
    """
    second = {
        "snippet": "N-Channel 100 V",
        "item": {
            "mpn": "NO-RDS",
            "octopart_url": "https://octopart.com/no-rds",
            "datasheets": [],
            "specs": {
                "breakdown_voltage_drain_to_source": {"value": ["100"]},
            },
        },
    }
    third = {
        "snippet": "N-Channel 30 V",
        "item": {
            "mpn": "NO-DATASHEET",
            "octopart_url": "https://octopart.com/no-datasheet",
            "datasheets": [],
            "specs": {
                "rds_drain_to_source_resistance_on": {"value": ["0.004"]},
                "breakdown_voltage_drain_to_source": {"value": ["30"]},
            },
        },
    }
    return [sample_part, second, third]


# Mark tests based on their type for selective running
def pytest_configure(config):
    """
    Register custom pytest markers.

    This allows us to run specific test categories:
    - pytest -m unit        (run only unit tests)
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test (isolated, fast)"
    )
