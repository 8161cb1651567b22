"""
Scene 2: how the biggest movers changed over time.

Ranks by percentage change and draws one line per top riser and decliner.
"""

from importstory.features.ranking import RankBy, select_highlights
from importstory.story.base import Scene, SceneContext
from importstory.story.charts import create_trend_lines_spec
from importstory.story.narratives import generate_lines_narrative


def create_lines_scene(ctx: SceneContext) -> Scene:
    """Create the multi-line trend scene."""
    settings = ctx.settings
    highlights = select_highlights(
        ctx.changes,
        ctx.top_n,
        by=RankBy.PCT,
        baseline_percentile=settings.lines_baseline_percentile,
    )
    focus = set(highlights.countries)
    # Keep data order, not ranking order, for stable colors
    series = [s for s in ctx.series if s.country in focus]

    return Scene(
        scene_id="lines",
        title="Trends over time",
        narrative=generate_lines_narrative(highlights, ctx.metric, ctx.top_n),
        chart=create_trend_lines_spec(
            "trend_lines",
            series,
            ctx.metric,
            riser=highlights.risers[0].country if highlights.risers else None,
            decliner=highlights.decliners[0].country if highlights.decliners else None,
            width=settings.chart_width,
            height=settings.chart_height,
            margins=settings.margins,
        ),
        key_metrics={
            "focus_countries": [s.country for s in series],
            "risers": [c.country for c in highlights.risers],
            "decliners": [c.country for c in highlights.decliners],
        },
    )
