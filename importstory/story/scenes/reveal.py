"""
Reveal scene: animated trend reveal that unlocks exploration.

Before the reveal completes the chart plays a left-to-right wipe with
tooltips and legend disabled. Once revealed, hover tooltips and legend
toggling are enabled; the legend reflects the active country set.
"""

from importstory.features.ranking import RankBy, select_highlights
from importstory.story.base import Annotation, Scene, SceneContext
from importstory.story.charts import create_trend_lines_spec
from importstory.story.narratives import format_percent, generate_reveal_narrative


def create_reveal_scene(ctx: SceneContext) -> Scene:
    """Create the reveal scene for the current reveal state."""
    settings = ctx.settings
    highlights = select_highlights(
        ctx.changes,
        ctx.top_n,
        by=RankBy.PCT,
        baseline_percentile=settings.lines_baseline_percentile,
    )
    focus = set(highlights.countries)
    series = [s for s in ctx.series if s.country in focus]
    hidden = frozenset(s.country for s in series if s.country not in ctx.active_countries)

    chart = create_trend_lines_spec(
        "reveal_lines",
        series,
        ctx.metric,
        hidden=hidden if ctx.revealed else frozenset(),
        width=settings.chart_width,
        height=settings.chart_height,
        margins=settings.margins,
    )

    riser = highlights.biggest_riser
    riser_series = ctx.find_series(riser.country) if riser else None
    if riser and riser_series:
        chart.annotations = [Annotation(
            title="Fastest riser",
            label=f"{riser.country} {format_percent(riser.change_pct)}",
            x=riser_series.last.date.isoformat(),
            y=riser_series.last.metric_value(ctx.metric),
            dx=-60,
            dy=-40,
        )]

    if ctx.revealed:
        chart.interactions = {"tooltips": True, "legend": True}
        chart.data["legend"] = [
            {"country": line["country"], "color": line["color"], "active": not line["hidden"]}
            for line in chart.data["lines"]
        ]
    else:
        chart.interactions = {"tooltips": False, "legend": False}
        chart.transitions = [{
            "type": "wipe",
            "direction": "left-to-right",
            "duration": settings.reveal_duration_ms,
            "on_end": "complete_reveal",
        }]

    return Scene(
        scene_id="reveal",
        title="The reveal",
        narrative=generate_reveal_narrative(highlights, ctx.metric, revealed=ctx.revealed),
        chart=chart,
        key_metrics={
            "focus_countries": [s.country for s in series],
            "hidden_countries": sorted(hidden) if ctx.revealed else [],
            "revealed": ctx.revealed,
        },
    )
