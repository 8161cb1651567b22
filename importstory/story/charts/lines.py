"""
Line chart specifications for monthly trends.

- create_trend_lines_spec: several countries on one time axis (lines and reveal scenes)
- create_country_trend_spec: one country with hover points (explore scene)
"""

from html import escape
from typing import Any, Sequence

from importstory.data.schemas import CountrySeries, Metric, MonthPoint
from importstory.story.base import Annotation, ChartSpec
from importstory.story.narratives import format_month, format_si

# d3.schemeTableau10
TABLEAU10 = [
    "#4e79a7", "#f28e2b", "#e15759", "#76b7b2", "#59a14f",
    "#edc948", "#b07aa1", "#ff9da7", "#9c755f", "#bab0ab",
]
ACCENT_COLOR = "#4e79a7"


def _point(point: MonthPoint, metric: Metric, country: str | None = None) -> dict[str, Any]:
    value = point.metric_value(metric)
    prefix = f"<strong>{escape(country)}</strong><br>" if country else ""
    return {
        "date": point.date.isoformat(),
        "value": value,
        "tooltip": f"{prefix}{format_month(point.date)}<br>{format_si(value)}",
    }


def _y_max(series: Sequence[CountrySeries], metric: Metric) -> float:
    values = [p.metric_value(metric) for s in series for p in s.values]
    return max(values) if values else 0.0


def _x_domain(series: Sequence[CountrySeries]) -> list[str]:
    dates = [p.date for s in series for p in s.values]
    if not dates:
        return []
    return [min(dates).isoformat(), max(dates).isoformat()]


def create_trend_lines_spec(
    chart_id: str,
    series: Sequence[CountrySeries],
    metric: Metric,
    *,
    riser: str | None = None,
    decliner: str | None = None,
    hidden: frozenset[str] = frozenset(),
    width: int = 880,
    height: int = 500,
    margins: dict[str, int] | None = None,
) -> ChartSpec:
    """Create a multi-line time series chart.

    Colors follow series order through the Tableau10 palette, so the same
    series list always gets the same colors.

    Args:
        chart_id: Unique identifier for the chart
        series: Country series to draw, in legend order
        metric: Metric plotted on the y axis
        riser: Country whose last point gets the "Riser" callout
        decliner: Country whose last point gets the "Decliner" callout
        hidden: Countries drawn hidden (legend toggled off)
        width: Chart width in pixels
        height: Chart height in pixels
        margins: Chart margins

    Returns:
        ChartSpec for D3 multi-line rendering
    """
    lines = [
        {
            "country": s.country,
            "color": TABLEAU10[i % len(TABLEAU10)],
            "hidden": s.country in hidden,
            "points": [_point(p, metric, s.country) for p in s.values],
        }
        for i, s in enumerate(series)
    ]

    by_country = {s.country: s for s in series}
    annotations = []
    for title, country, dx, dy in (("Riser", riser, 20, -40), ("Decliner", decliner, -40, 30)):
        s = by_country.get(country) if country else None
        if s is None:
            continue
        annotations.append(Annotation(
            title=title,
            label=s.country,
            x=s.last.date.isoformat(),
            y=s.last.metric_value(metric),
            dx=dx,
            dy=dy,
        ))

    return ChartSpec(
        chart_id=chart_id,
        chart_type="multi_line",
        data={"lines": lines},
        config={
            "width": width,
            "height": height,
            "margins": margins or {},
            "metric": metric.value,
            "xDomain": _x_domain(series),
            "yDomain": [0, _y_max(series, metric)],
            "yTickFormat": ".2s",
            "yTicks": 6,
        },
        annotations=annotations,
        interactions={"tooltips": True, "legend": False},
    )


def create_country_trend_spec(
    chart_id: str,
    series: CountrySeries,
    metric: Metric,
    *,
    width: int = 880,
    height: int = 500,
    margins: dict[str, int] | None = None,
) -> ChartSpec:
    """Create a single-country line chart with hoverable points.

    The title callout sits on the point a third of the way along the series.
    """
    anchor = series.values[len(series.values) // 3]

    return ChartSpec(
        chart_id=chart_id,
        chart_type="single_line",
        data={
            "country": series.country,
            "color": ACCENT_COLOR,
            "points": [_point(p, metric) for p in series.values],
        },
        config={
            "width": width,
            "height": height,
            "margins": margins or {},
            "metric": metric.value,
            "xDomain": _x_domain([series]),
            "yDomain": [0, _y_max([series], metric)],
            "yTickFormat": ".2s",
            "yTicks": 6,
            "pointRadius": 3,
        },
        annotations=[
            Annotation(
                title=series.country,
                label=f"Trend in {metric.label.lower()}",
                x=anchor.date.isoformat(),
                y=anchor.metric_value(metric),
                dx=20,
                dy=-20,
            )
        ],
        interactions={"tooltips": True, "legend": False},
    )


def create_title_card_spec(
    chart_id: str,
    title: str,
    subtitle: str,
    *,
    width: int = 880,
    height: int = 500,
) -> ChartSpec:
    """Create the quiet title card shown on the intro scene."""
    return ChartSpec(
        chart_id=chart_id,
        chart_type="title_card",
        data={"title": title, "subtitle": subtitle},
        config={"width": width, "height": height, "titleSize": 28, "subtitleSize": 18},
        interactions={"tooltips": False, "legend": False},
    )
