"""
Auto-narrative generation from data insights.

This module generates the text that accompanies each scene, plus the number
and date formatting shared by scene text, tooltips and annotations. Text is
data-driven and updates with the active metric.
"""

import math
from datetime import date

from importstory.data.schemas import ChangeRecord, Metric
from importstory.features.ranking import Highlights
from importstory.story.base import SceneNarrative


# =============================================================================
# FORMATTING
# =============================================================================

SI_PREFIXES = ["y", "z", "a", "f", "p", "n", "µ", "m", "", "k", "M", "G", "T", "P", "E", "Z", "Y"]


def format_si(value: float, digits: int = 2, *, signed: bool = False) -> str:
    """Format a number with SI prefix and fixed significant digits.

    Matches the browser's ".2s" format: 1234 -> "1.2k", 150 -> "150",
    0.5 -> "500m". With signed=True positive numbers get a leading "+".
    """
    sign = "-" if value < 0 else ("+" if signed else "")
    if value == 0 or not math.isfinite(value):
        return f"{sign}{0:.{digits - 1}f}"

    rounded = float(f"{abs(value):.{digits}g}")
    if math.isinf(rounded):
        rounded = abs(value)
    exponent = math.floor(math.log10(rounded))
    k = max(-8, min(8, exponent // 3))
    scaled = rounded / 10 ** (3 * k)
    decimals = max(0, digits - 1 - (exponent - 3 * k))
    return f"{sign}{scaled:.{decimals}f}{SI_PREFIXES[k + 8]}"


def format_percent(value: float) -> str:
    """Signed whole percent: 0.5 -> "+50%"."""
    return f"{value:+.0%}"


def format_month(value: date) -> str:
    """Month label: Jan 2024."""
    return value.strftime("%b %Y")


def metric_noun(metric: Metric) -> str:
    return metric.label.lower()


# =============================================================================
# NARRATIVE GENERATORS
# =============================================================================


def generate_intro_narrative(*, variant: str = "slideshow") -> SceneNarrative:
    """Generate text for the intro card."""
    trigger = "Start" if variant == "reveal" else "Next"
    body = (
        "This short slideshow highlights which supplier countries are rising or declining "
        f"in US apparel imports. Click {trigger} to begin."
    )
    return SceneNarrative(
        scene_id="intro",
        auto_headline="Where do America's clothes come from?",
        auto_body=body,
    )


def generate_change_bars_narrative(highlights: Highlights, metric: Metric) -> SceneNarrative:
    """Generate text for the absolute-change bar chart."""
    noun = metric_noun(metric)
    riser = highlights.biggest_riser
    decliner = highlights.biggest_decliner

    if riser and decliner:
        headline = f"{riser.country} gained the most {noun}; {decliner.country} lost the most"
    elif riser:
        headline = f"{riser.country} gained the most {noun}"
    elif decliner:
        headline = f"{decliner.country} lost the most {noun}"
    else:
        headline = f"No country changed its {noun}"

    body = (
        "From the first month in the data to the most recent, some countries grew, others shrank. "
        f"Bars show absolute change in {noun} (Δ = last − first). "
        "Green = rising, orange = declining."
    )
    return SceneNarrative(scene_id="change_bars", auto_headline=headline, auto_body=body)


def generate_lines_narrative(highlights: Highlights, metric: Metric, top_n: int) -> SceneNarrative:
    """Generate text for the multi-line trend chart."""
    noun = metric_noun(metric)
    riser = highlights.biggest_riser

    if riser:
        headline = f"{riser.country} grew fastest ({format_percent(riser.change_pct)})"
    else:
        headline = f"Monthly {noun} for the biggest movers"

    body = (
        "How did those countries change over time? "
        f"Lines show monthly {noun} for the top {top_n} risers and decliners."
    )
    return SceneNarrative(scene_id="lines", auto_headline=headline, auto_body=body)


def generate_explore_narrative(change: ChangeRecord | None, metric: Metric) -> SceneNarrative:
    """Generate text for the single-country exploration chart."""
    if change is None:
        headline = "Explore any country"
    else:
        direction = "up" if change.change_abs >= 0 else "down"
        headline = (
            f"{change.country}: {metric_noun(metric)} {direction} "
            f"{format_si(abs(change.change_abs))} ({format_percent(change.change_pct)})"
        )

    body = "Explore any country. Hover to see exact values. Change metric with the radio buttons."
    return SceneNarrative(scene_id="explore", auto_headline=headline, auto_body=body)


def generate_reveal_narrative(
    highlights: Highlights,
    metric: Metric,
    *,
    revealed: bool,
) -> SceneNarrative:
    """Generate text for the animated reveal chart."""
    noun = metric_noun(metric)
    riser = highlights.biggest_riser
    headline = (
        f"{riser.country} is pulling ahead in {noun}" if riser else f"How monthly {noun} moved"
    )

    if revealed:
        body = (
            "Hover a line to see exact values. "
            "Click a country in the legend to show or hide it."
        )
    else:
        body = f"Watch monthly {noun} unfold for the biggest risers and decliners."
    return SceneNarrative(scene_id="reveal", auto_headline=headline, auto_body=body)


def export_narratives_to_dict(narratives: dict[str, SceneNarrative]) -> dict[str, dict[str, str]]:
    """Export current narrative text keyed by scene id."""
    return {
        scene_id: {"headline": n.headline, "body": n.body}
        for scene_id, n in narratives.items()
    }
