"""
Module: changes

Purpose: First-vs-last change metrics for each country series.

Changes for every metric are computed once and held in a ChangeTable, so
switching the active metric is a lookup rather than a recomputation.
"""

import math
import sys
from dataclasses import dataclass, field
from typing import Iterable

from importstory.data.schemas import ChangeRecord, CountrySeries, Metric


def compute_change(series: CountrySeries, metric: Metric) -> ChangeRecord:
    """
    Compute the change of one metric between a series' first and last month.

    A zero first value yields change_pct == 0 instead of an infinite ratio,
    and so does a baseline so small that the ratio overflows. An absolute
    change beyond the float range is clamped to the largest finite float.
    Single-month series have first == last and therefore zero change.

    Args:
        series: Country series (non-empty by construction)
        metric: Metric to measure

    Returns:
        ChangeRecord for the country
    """
    first_value = series.first.metric_value(metric)
    last_value = series.last.metric_value(metric)
    change_abs = last_value - first_value
    if math.isinf(change_abs):
        change_abs = math.copysign(sys.float_info.max, change_abs)

    change_pct = change_abs / first_value if first_value != 0 else 0.0
    if not math.isfinite(change_pct):
        change_pct = 0.0

    return ChangeRecord(
        country=series.country,
        metric=metric,
        first_value=first_value,
        last_value=last_value,
        change_abs=change_abs,
        change_pct=change_pct,
    )


def compute_changes(series: Iterable[CountrySeries], metric: Metric) -> list[ChangeRecord]:
    """Compute ChangeRecords for all series, preserving series order."""
    return [compute_change(s, metric) for s in series]


@dataclass(frozen=True)
class ChangeTable:
    """ChangeRecords for every metric, computed once at load time."""

    by_metric: dict[Metric, tuple[ChangeRecord, ...]] = field(default_factory=dict)

    def for_metric(self, metric: Metric) -> list[ChangeRecord]:
        """Return the ChangeRecords of the given metric."""
        return list(self.by_metric[metric])

    def get(self, country: str, metric: Metric) -> ChangeRecord | None:
        """Look up one country's ChangeRecord."""
        return next((c for c in self.by_metric[metric] if c.country == country), None)

    def greatest_pct_country(self, metric: Metric) -> str | None:
        """Country with the largest change_pct (first on ties), None when empty."""
        records = self.by_metric.get(metric, ())
        if not records:
            return None
        return max(records, key=lambda c: c.change_pct).country


def build_change_table(
    series: Iterable[CountrySeries],
    metrics: Iterable[Metric] = tuple(Metric),
) -> ChangeTable:
    """
    Build a ChangeTable holding changes for each requested metric.

    Args:
        series: Country series
        metrics: Metrics to precompute (default: all)

    Returns:
        ChangeTable keyed by metric
    """
    series = list(series)
    return ChangeTable(
        by_metric={metric: tuple(compute_changes(series, metric)) for metric in metrics}
    )
