"""
Tests for importstory/features/aggregators.py
"""

from datetime import date

from importstory.data.schemas import RawRecord
from importstory.features.aggregators import (
    aggregate_series,
    date_extent,
    list_countries,
    series_by_country,
)


def make_record(country: str, year: int, month: int, quantity: float, value: float) -> RawRecord:
    """Helper to create RawRecord."""
    return RawRecord(country=country, year=year, month=month, quantity=quantity, value=value)


# =============================================================================
# AGGREGATE SERIES TESTS
# =============================================================================


class TestAggregateSeries:
    """Tests for aggregate_series."""

    def test_example_dataset(self, example_series) -> None:
        by_country = series_by_country(example_series)

        usa = by_country["USA"]
        assert usa.dates == [date(2024, 1, 1), date(2024, 2, 1)]
        assert [(p.quantity, p.value) for p in usa.values] == [(100, 1000), (150, 1200)]

        china = by_country["China"]
        assert [(p.quantity, p.value) for p in china.values] == [(500, 5000), (400, 4300)]

    def test_duplicate_months_are_summed(self) -> None:
        records = [
            make_record("Peru", 2024, 1, 10, 100),
            make_record("Peru", 2024, 1, 5, 40),
            make_record("Peru", 2024, 2, 1, 1),
        ]
        (series,) = aggregate_series(records)

        assert len(series.values) == 2
        assert series.first.quantity == 15
        assert series.first.value == 140

    def test_overflowing_month_is_skipped(self) -> None:
        records = [
            make_record("Peru", 2024, 1, 1.5e308, 1),
            make_record("Peru", 2024, 1, 1.5e308, 1),
            make_record("Peru", 2024, 2, 5, 5),
            make_record("Chile", 2024, 1, 1, 1.5e308),
            make_record("Chile", 2024, 1, 1, 1.5e308),
        ]
        series = aggregate_series(records)

        assert [s.country for s in series] == ["Peru"]
        assert series[0].dates == [date(2024, 2, 1)]

    def test_unsorted_input_is_sorted(self) -> None:
        records = [
            make_record("Peru", 2024, 3, 3, 3),
            make_record("Peru", 2023, 12, 1, 1),
            make_record("Peru", 2024, 1, 2, 2),
        ]
        (series,) = aggregate_series(records)
        assert series.dates == [date(2023, 12, 1), date(2024, 1, 1), date(2024, 3, 1)]

    def test_country_order_is_first_appearance(self, example_series) -> None:
        assert [s.country for s in example_series] == ["USA", "China"]

    def test_every_country_has_points(self, market_series) -> None:
        for series in market_series:
            assert series.values
            assert all(a.date < b.date for a, b in zip(series.values, series.values[1:]))

    def test_empty_input(self) -> None:
        assert aggregate_series([]) == []


# =============================================================================
# HELPER TESTS
# =============================================================================


class TestHelpers:
    """Tests for lookup helpers."""

    def test_list_countries_sorted(self, example_series) -> None:
        assert list_countries(example_series) == ["China", "USA"]

    def test_date_extent(self, example_series) -> None:
        assert date_extent(example_series) == (date(2024, 1, 1), date(2024, 2, 1))
        assert date_extent([]) is None
