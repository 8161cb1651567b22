"""
Module: ranking

Purpose: Pick the top risers and decliners out of a set of ChangeRecords.

Key Functions:
- top_risers / top_decliners: Sorted, stable top-N selection
- baseline_threshold / apply_baseline_filter: Drop near-zero starting values
- select_highlights: One call combining the above for a scene
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

import numpy as np

from importstory.data.schemas import ChangeRecord


class RankBy(str, Enum):
    """Which change measure drives the ranking."""

    ABS = "abs"
    PCT = "pct"


def _key(change: ChangeRecord, by: RankBy) -> float:
    return change.change_abs if by == RankBy.ABS else change.change_pct


def _finite(changes: Iterable[ChangeRecord], by: RankBy) -> list[ChangeRecord]:
    return [c for c in changes if math.isfinite(_key(c, by))]


def top_risers(
    changes: Iterable[ChangeRecord],
    n: int,
    *,
    by: RankBy = RankBy.ABS,
) -> list[ChangeRecord]:
    """Return the first n records sorted by change descending (stable on ties)."""
    if n <= 0:
        return []
    return sorted(_finite(changes, by), key=lambda c: -_key(c, by))[:n]


def top_decliners(
    changes: Iterable[ChangeRecord],
    n: int,
    *,
    by: RankBy = RankBy.ABS,
) -> list[ChangeRecord]:
    """Return the first n records sorted by change ascending (stable on ties)."""
    if n <= 0:
        return []
    return sorted(_finite(changes, by), key=lambda c: _key(c, by))[:n]


def baseline_threshold(
    changes: Iterable[ChangeRecord],
    percentile: float = 0.2,
) -> float | None:
    """
    Quantile of the strictly positive first values.

    Uses linear interpolation between order statistics, matching the
    quantile used by the browser charts.

    Args:
        changes: ChangeRecords to inspect
        percentile: Quantile in [0, 1] (0.2 = 20th percentile)

    Returns:
        Threshold value, or None when no first value is positive
    """
    positives = [c.first_value for c in changes if c.first_value > 0]
    if not positives:
        return None
    return float(np.quantile(np.asarray(positives, dtype=float), percentile))


def apply_baseline_filter(
    changes: Iterable[ChangeRecord],
    threshold: float | None,
) -> list[ChangeRecord]:
    """Keep records whose first value is at least the threshold."""
    if threshold is None:
        return list(changes)
    return [c for c in changes if c.first_value >= threshold]


@dataclass(frozen=True)
class Highlights:
    """Top risers and decliners selected for a scene."""

    risers: list[ChangeRecord] = field(default_factory=list)
    decliners: list[ChangeRecord] = field(default_factory=list)
    threshold: float | None = None

    @property
    def countries(self) -> list[str]:
        """Union of riser and decliner countries, risers first, no repeats."""
        seen: dict[str, None] = {}
        for change in [*self.risers, *self.decliners]:
            seen.setdefault(change.country, None)
        return list(seen)

    @property
    def biggest_riser(self) -> ChangeRecord | None:
        """Top riser, only if it actually rose."""
        if self.risers and self.risers[0].is_riser:
            return self.risers[0]
        return None

    @property
    def biggest_decliner(self) -> ChangeRecord | None:
        """Top decliner, only if it actually declined."""
        if self.decliners and self.decliners[0].is_decliner:
            return self.decliners[0]
        return None


def select_highlights(
    changes: Iterable[ChangeRecord],
    n: int,
    *,
    by: RankBy = RankBy.ABS,
    baseline_percentile: float | None = None,
) -> Highlights:
    """
    Select top-n risers and decliners, optionally after a baseline filter.

    Args:
        changes: ChangeRecords for the active metric
        n: How many risers and how many decliners to keep
        by: Rank by absolute or percentage change
        baseline_percentile: If set, drop records whose first value falls
            below this quantile of positive first values

    Returns:
        Highlights with risers, decliners and the threshold used
    """
    candidates = _finite(changes, by)
    threshold = None
    if baseline_percentile is not None:
        threshold = baseline_threshold(candidates, baseline_percentile)
        candidates = apply_baseline_filter(candidates, threshold)

    return Highlights(
        risers=top_risers(candidates, n, by=by),
        decliners=top_decliners(candidates, n, by=by),
        threshold=threshold,
    )
