"""
Calendar Solver Test Configuration

Shared fixtures for all tests.
"""
from datetime import date, timedelta
from typing import List

import pytest


# =============================================================================
# FIXTURES: Dates
# =============================================================================

@pytest.fixture
def d0() -> date:
    """A Monday, so weekday names are predictable."""
    return date(2024, 3, 4)


@pytest.fixture
def days(d0) -> List[date]:
    """Five consecutive days D0..D4."""
    return [d0 + timedelta(days=i) for i in range(5)]


@pytest.fixture(params=["single_pass", "ac3"])
def arc_mode(request) -> str:
    return request.param


@pytest.fixture(params=[True, False], ids=["fc", "no-fc"])
def forward_checking(request) -> bool:
    return request.param
