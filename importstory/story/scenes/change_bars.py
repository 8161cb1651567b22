"""
Scene 1: who rose and who declined.

Bars show absolute change (last month minus first month) for the top risers
and decliners. Countries with a tiny starting value are filtered out first
so that bars stay comparable.
"""

from importstory.features.ranking import RankBy, select_highlights
from importstory.story.base import Scene, SceneContext
from importstory.story.charts import create_change_bars_spec
from importstory.story.narratives import generate_change_bars_narrative


def create_change_bars_scene(ctx: SceneContext) -> Scene:
    """Create the absolute-change bar scene.

    Args:
        ctx: Scene context (metric, changes, top_n, settings)

    Returns:
        Scene with a diverging bar chart and riser/decliner callouts
    """
    settings = ctx.settings
    highlights = select_highlights(
        ctx.changes,
        ctx.top_n,
        by=RankBy.ABS,
        baseline_percentile=settings.bars_baseline_percentile,
    )

    riser = highlights.biggest_riser
    decliner = highlights.biggest_decliner

    return Scene(
        scene_id="change_bars",
        title="Risers and decliners",
        narrative=generate_change_bars_narrative(highlights, ctx.metric),
        chart=create_change_bars_spec(
            "change_bars",
            highlights,
            ctx.metric,
            width=settings.chart_width,
            height=settings.chart_height,
            margins=settings.margins,
        ),
        key_metrics={
            "risers": [c.country for c in highlights.risers],
            "decliners": [c.country for c in highlights.decliners],
            "baseline_threshold": highlights.threshold,
            "biggest_riser": riser.country if riser else None,
            "biggest_decliner": decliner.country if decliner else None,
        },
    )
