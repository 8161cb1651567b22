"""
Scene 3: explore any country.

Draws the selected country's monthly trend, falling back to the first
series when nothing (or an unknown country) is selected.
"""

from importstory.story.base import Scene, SceneContext
from importstory.story.charts import create_country_trend_spec
from importstory.story.narratives import generate_explore_narrative


def create_explore_scene(ctx: SceneContext) -> Scene:
    """Create the single-country exploration scene."""
    settings = ctx.settings
    series = ctx.find_series(ctx.selected_country) or ctx.series[0]
    change = next((c for c in ctx.changes if c.country == series.country), None)

    return Scene(
        scene_id="explore",
        title="Explore a country",
        narrative=generate_explore_narrative(change, ctx.metric),
        chart=create_country_trend_spec(
            "country_trend",
            series,
            ctx.metric,
            width=settings.chart_width,
            height=settings.chart_height,
            margins=settings.margins,
        ),
        key_metrics={
            "country": series.country,
            "months": len(series.values),
            "change_abs": change.change_abs if change else None,
            "change_pct": change.change_pct if change else None,
        },
    )
