"""
Scene 0: the intro card.

A title card with the story's title and subtitle; no data is drawn.
"""

from importstory.story.base import Scene, SceneContext
from importstory.story.charts import create_title_card_spec
from importstory.story.narratives import generate_intro_narrative


def create_intro_scene(ctx: SceneContext) -> Scene:
    """Create the intro scene."""
    settings = ctx.settings
    return Scene(
        scene_id="intro",
        title="Introduction",
        narrative=generate_intro_narrative(variant=ctx.variant),
        chart=create_title_card_spec(
            "intro_card",
            settings.title,
            settings.subtitle,
            width=settings.chart_width,
            height=settings.chart_height,
        ),
        key_metrics={"countries": len(ctx.series)},
    )
