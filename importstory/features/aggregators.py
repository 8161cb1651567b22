"""
Module: aggregators

Purpose: Group raw import records into per-country monthly series.

Pure functions; no state is kept between calls.
"""

import logging
import math
from collections import defaultdict
from datetime import date
from typing import Iterable

from importstory.data.schemas import CountrySeries, MonthPoint, RawRecord

logger = logging.getLogger(__name__)


def aggregate_series(records: Iterable[RawRecord]) -> list[CountrySeries]:
    """
    Build one CountrySeries per country from raw records.

    Countries keep the order in which they first appear. Within a country,
    rows sharing a month (e.g. separate product categories) are summed into
    a single MonthPoint, and points are sorted ascending by date.

    A month whose summed quantity or value overflows the float range is
    left out, and a country left with no months is left out entirely.

    Args:
        records: Validated raw records

    Returns:
        List of CountrySeries, one per distinct country with a finite month
    """
    # country -> month start -> [quantity, value]
    totals: dict[str, dict[date, list[float]]] = defaultdict(dict)

    for record in records:
        by_month = totals[record.country]
        month_totals = by_month.setdefault(record.date, [0.0, 0.0])
        month_totals[0] += record.quantity
        month_totals[1] += record.value

    series = []
    for country, by_month in totals.items():
        points = []
        for month, (quantity, value) in sorted(by_month.items()):
            if not (math.isfinite(quantity) and math.isfinite(value)):
                logger.warning(
                    f"Skipping {country} {month:%Y-%m}: monthly total overflows"
                )
                continue
            points.append(MonthPoint(date=month, quantity=quantity, value=value))

        if not points:
            logger.warning(f"Skipping {country}: no month with a finite total")
            continue
        series.append(CountrySeries(country=country, values=tuple(points)))

    return series


def series_by_country(series: Iterable[CountrySeries]) -> dict[str, CountrySeries]:
    """Index series by country name."""
    return {s.country: s for s in series}


def list_countries(series: Iterable[CountrySeries]) -> list[str]:
    """Distinct country names in ascending order (country picker population)."""
    return sorted({s.country for s in series})


def date_extent(series: Iterable[CountrySeries]) -> tuple[date, date] | None:
    """Earliest and latest month across all series, or None when empty."""
    dates = [p.date for s in series for p in s.values]
    if not dates:
        return None
    return min(dates), max(dates)
