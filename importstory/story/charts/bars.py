"""
Diverging bar chart specification for first-vs-last change.

Used in the change_bars scene: one horizontal bar per highlighted country,
extending right for risers and left for decliners from a dashed zero line.
"""

from html import escape

from importstory.data.schemas import ChangeRecord, Metric
from importstory.features.ranking import Highlights
from importstory.story.base import Annotation, ChartSpec
from importstory.story.narratives import format_si

RISE_COLOR = "#2ca25f"
DECLINE_COLOR = "#f28e2b"


def create_change_bars_spec(
    chart_id: str,
    highlights: Highlights,
    metric: Metric,
    *,
    width: int = 880,
    height: int = 500,
    margins: dict[str, int] | None = None,
) -> ChartSpec:
    """Create a diverging bar chart of absolute change.

    Args:
        chart_id: Unique identifier for the chart
        highlights: Top risers and decliners (risers drawn first)
        metric: Active metric, used in labels
        width: Chart width in pixels
        height: Chart height in pixels
        margins: Chart margins (top, right, bottom, left)

    Returns:
        ChartSpec for D3 diverging bar rendering
    """
    # With few countries the two lists overlap; one bar per country
    view = {c.country: c for c in [*highlights.risers, *highlights.decliners]}
    bars = [_bar(view[country]) for country in highlights.countries]

    values = [b["change_abs"] for b in bars]
    x_domain = [min(0.0, *values), max(0.0, *values)]

    annotations = []
    riser = highlights.biggest_riser
    if riser:
        annotations.append(Annotation(
            title="Biggest riser",
            label=f"{riser.country} up {format_si(riser.change_abs)}",
            x=riser.change_abs,
            y=riser.country,
            dx=40,
            dy=-30,
        ))
    decliner = highlights.biggest_decliner
    if decliner:
        annotations.append(Annotation(
            title="Biggest decliner",
            label=f"{decliner.country} down {format_si(decliner.change_abs)}",
            x=decliner.change_abs,
            y=decliner.country,
            dx=-120,
            dy=30,
        ))

    return ChartSpec(
        chart_id=chart_id,
        chart_type="diverging_bar",
        data={"bars": bars},
        config={
            "width": width,
            "height": height,
            "margins": margins or {},
            "metric": metric.value,
            "xDomain": x_domain,
            "xTickFormat": "+.2s",
            "bandPadding": 0.15,
            "zeroLine": True,
            "riseColor": RISE_COLOR,
            "declineColor": DECLINE_COLOR,
            "baselineThreshold": highlights.threshold,
        },
        annotations=annotations,
        interactions={"tooltips": True, "legend": False},
    )


def _bar(change: ChangeRecord) -> dict:
    return {
        "country": change.country,
        "change_abs": change.change_abs,
        "first": change.first_value,
        "last": change.last_value,
        "direction": "rise" if change.change_abs >= 0 else "decline",
        "tooltip": (
            f"{escape(change.country)}<br>Δ {format_si(change.change_abs)} "
            f"({format_si(change.first_value)} → {format_si(change.last_value)})"
        ),
    }
