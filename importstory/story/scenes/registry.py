"""
Scene lists for each story variant.

Both variants share the same data pipeline and differ only in which scenes
they show and in what order:
- slideshow: intro, change_bars, lines, explore
- reveal: intro, reveal (exploration unlocked after the animation)
"""

from dataclasses import dataclass
from typing import Callable

from importstory.story.base import Scene, SceneContext
from importstory.story.overrides import apply_override
from importstory.story.scenes.change_bars import create_change_bars_scene
from importstory.story.scenes.explore import create_explore_scene
from importstory.story.scenes.intro import create_intro_scene
from importstory.story.scenes.lines import create_lines_scene
from importstory.story.scenes.reveal import create_reveal_scene


@dataclass(frozen=True)
class SceneDefinition:
    """A scene slot in a story variant."""

    scene_id: str
    builder: Callable[[SceneContext], Scene]
    shows_country_picker: bool = False
    shows_start: bool = False
    gated_by_reveal: bool = False


VARIANTS: dict[str, tuple[SceneDefinition, ...]] = {
    "slideshow": (
        SceneDefinition("intro", create_intro_scene),
        SceneDefinition("change_bars", create_change_bars_scene),
        SceneDefinition("lines", create_lines_scene),
        SceneDefinition("explore", create_explore_scene, shows_country_picker=True),
    ),
    "reveal": (
        SceneDefinition("intro", create_intro_scene, shows_start=True),
        SceneDefinition("reveal", create_reveal_scene, gated_by_reveal=True),
    ),
}


def get_variant(name: str) -> tuple[SceneDefinition, ...]:
    """Return the scene list for a variant.

    Raises:
        KeyError: If the variant is unknown
    """
    if name not in VARIANTS:
        raise KeyError(f"Unknown story variant {name!r}; choose from {sorted(VARIANTS)}")
    return VARIANTS[name]


def build_scene(
    definition: SceneDefinition,
    ctx: SceneContext,
    overrides: dict[str, dict[str, str | None]] | None = None,
) -> Scene:
    """Run a scene builder and apply any narrative overrides."""
    scene = definition.builder(ctx)
    if overrides:
        apply_override(scene.narrative, overrides)
    return scene
