"""
Feature derivation for the import story.

Aggregation of raw records into series, change metrics, and ranking helpers.
"""

from importstory.features.aggregators import (
    aggregate_series,
    date_extent,
    list_countries,
    series_by_country,
)
from importstory.features.changes import (
    ChangeTable,
    build_change_table,
    compute_change,
    compute_changes,
)
from importstory.features.ranking import (
    Highlights,
    RankBy,
    apply_baseline_filter,
    baseline_threshold,
    select_highlights,
    top_decliners,
    top_risers,
)

__all__ = [
    "aggregate_series",
    "date_extent",
    "list_countries",
    "series_by_country",
    "ChangeTable",
    "build_change_table",
    "compute_change",
    "compute_changes",
    "Highlights",
    "RankBy",
    "apply_baseline_filter",
    "baseline_threshold",
    "select_highlights",
    "top_decliners",
    "top_risers",
]
