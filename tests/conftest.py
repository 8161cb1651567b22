"""
Shared fixtures for the import story test suite.
"""

import pytest

from importstory.data.loader import load_rows
from importstory.features.aggregators import aggregate_series
from importstory.features.changes import build_change_table
from importstory.settings import Settings


# =============================================================================
# RAW ROWS
# =============================================================================


@pytest.fixture
def example_rows() -> list[dict]:
    """Two countries over two months: USA rises, China declines."""
    return [
        {"Country": "USA", "Year": 2024, "Month": 1, "Quantity": 100, "Value": 1000},
        {"Country": "USA", "Year": 2024, "Month": 2, "Quantity": 150, "Value": 1200},
        {"Country": "China", "Year": 2024, "Month": 1, "Quantity": 500, "Value": 5000},
        {"Country": "China", "Year": 2024, "Month": 2, "Quantity": 400, "Value": 4300},
    ]


@pytest.fixture
def market_rows() -> list[dict]:
    """Six countries over three months with a mix of risers and decliners."""
    monthly = {
        "Vietnam": [(200, 2000), (260, 2500), (320, 3100)],
        "China": [(900, 8000), (820, 7600), (700, 6900)],
        "India": [(150, 1600), (160, 1650), (210, 2100)],
        "Mexico": [(300, 3500), (290, 3400), (280, 3300)],
        "Jordan": [(5, 60), (8, 90), (20, 240)],
        "Peru": [(0, 0), (10, 100), (30, 300)],
    }
    return [
        {"Country": country, "Year": 2024, "Month": month, "Quantity": q, "Value": v}
        for country, points in monthly.items()
        for month, (q, v) in enumerate(points, start=1)
    ]


# =============================================================================
# DERIVED DATA
# =============================================================================


@pytest.fixture
def example_series(example_rows):
    return aggregate_series(load_rows(example_rows).records)


@pytest.fixture
def example_table(example_series):
    return build_change_table(example_series)


@pytest.fixture
def market_series(market_rows):
    return aggregate_series(load_rows(market_rows).records)


@pytest.fixture
def market_table(market_series):
    return build_change_table(market_series)


@pytest.fixture
def settings() -> Settings:
    """Settings with fixed values, independent of the environment."""
    return Settings(
        variant="slideshow",
        default_metric="quantity",
        top_n=5,
        bars_baseline_percentile=0.2,
        lines_baseline_percentile=None,
        reveal_duration_ms=2500,
        narrative_overrides_path=None,
    )
