"""
Tests for importstory/features/ranking.py
"""

import pytest

from importstory.data.schemas import ChangeRecord, Metric
from importstory.features.ranking import (
    Highlights,
    RankBy,
    apply_baseline_filter,
    baseline_threshold,
    select_highlights,
    top_decliners,
    top_risers,
)


def make_change(country: str, first: float, last: float) -> ChangeRecord:
    """Helper to create ChangeRecord."""
    change_abs = last - first
    return ChangeRecord(
        country=country,
        metric=Metric.QUANTITY,
        first_value=first,
        last_value=last,
        change_abs=change_abs,
        change_pct=change_abs / first if first else 0.0,
    )


# =============================================================================
# TOP-N TESTS
# =============================================================================


class TestTopN:
    """Tests for top_risers and top_decliners."""

    def test_example_dataset(self, example_table) -> None:
        changes = example_table.for_metric(Metric.QUANTITY)
        assert [c.country for c in top_risers(changes, 1)] == ["USA"]
        assert [c.country for c in top_decliners(changes, 1)] == ["China"]

    def test_by_pct(self, market_table) -> None:
        changes = market_table.for_metric(Metric.QUANTITY)
        assert [c.country for c in top_risers(changes, 2, by=RankBy.PCT)] == ["Jordan", "Vietnam"]
        assert [c.country for c in top_decliners(changes, 2, by=RankBy.PCT)] == ["China", "Mexico"]

    def test_ties_keep_input_order(self) -> None:
        changes = [make_change("A", 10, 20), make_change("B", 30, 40), make_change("C", 1, 5)]
        assert [c.country for c in top_risers(changes, 2)] == ["A", "B"]

    def test_n_larger_than_input(self, example_table) -> None:
        changes = example_table.for_metric(Metric.QUANTITY)
        assert len(top_risers(changes, 10)) == 2

    @pytest.mark.parametrize("n", [0, -1])
    def test_non_positive_n(self, example_table, n: int) -> None:
        changes = example_table.for_metric(Metric.QUANTITY)
        assert top_risers(changes, n) == []
        assert top_decliners(changes, n) == []


# =============================================================================
# BASELINE FILTER TESTS
# =============================================================================


class TestBaselineFilter:
    """Tests for baseline_threshold and apply_baseline_filter."""

    def test_threshold_interpolates(self, example_table) -> None:
        changes = example_table.for_metric(Metric.QUANTITY)
        # 20th percentile of [100, 500]
        assert baseline_threshold(changes, 0.2) == pytest.approx(180.0)

    def test_threshold_ignores_non_positive(self) -> None:
        changes = [make_change("A", 0, 5), make_change("B", 10, 5), make_change("C", 20, 5)]
        assert baseline_threshold(changes, 0.5) == pytest.approx(15.0)

    def test_threshold_none_without_positive_values(self) -> None:
        assert baseline_threshold([make_change("A", 0, 5)], 0.2) is None

    def test_filter(self, example_table) -> None:
        changes = example_table.for_metric(Metric.QUANTITY)
        kept = apply_baseline_filter(changes, 180.0)
        assert [c.country for c in kept] == ["China"]

    def test_filter_none_keeps_all(self, example_table) -> None:
        changes = example_table.for_metric(Metric.QUANTITY)
        assert apply_baseline_filter(changes, None) == changes


# =============================================================================
# HIGHLIGHTS TESTS
# =============================================================================


class TestSelectHighlights:
    """Tests for select_highlights and Highlights."""

    def test_without_filter(self, example_table) -> None:
        highlights = select_highlights(example_table.for_metric(Metric.QUANTITY), 1)
        assert highlights.biggest_riser.country == "USA"
        assert highlights.biggest_decliner.country == "China"
        assert highlights.threshold is None

    def test_filter_removes_small_baseline(self, example_table) -> None:
        highlights = select_highlights(
            example_table.for_metric(Metric.QUANTITY), 1, baseline_percentile=0.2
        )
        assert highlights.threshold == pytest.approx(180.0)
        assert highlights.countries == ["China"]
        # China only declined, so there is no riser to call out
        assert highlights.biggest_riser is None
        assert highlights.biggest_decliner.country == "China"

    def test_market_bars(self, market_table) -> None:
        highlights = select_highlights(
            market_table.for_metric(Metric.QUANTITY), 2, by=RankBy.ABS, baseline_percentile=0.2
        )
        assert highlights.threshold == pytest.approx(121.0)
        assert [c.country for c in highlights.risers] == ["Vietnam", "India"]
        assert [c.country for c in highlights.decliners] == ["China", "Mexico"]

    def test_countries_union_without_repeats(self) -> None:
        a, b = make_change("A", 10, 20), make_change("B", 10, 5)
        highlights = Highlights(risers=[a, b], decliners=[b, a])
        assert highlights.countries == ["A", "B"]
