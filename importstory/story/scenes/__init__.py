"""
Story scene implementations.

Each module creates a complete Scene from a SceneContext:
- intro: title card
- change_bars: absolute change of the top risers and decliners
- lines: monthly trends of the biggest percentage movers
- explore: one chosen country's trend
- reveal: animated trend reveal gating exploration
"""

from importstory.story.scenes.change_bars import create_change_bars_scene
from importstory.story.scenes.explore import create_explore_scene
from importstory.story.scenes.intro import create_intro_scene
from importstory.story.scenes.lines import create_lines_scene
from importstory.story.scenes.registry import (
    VARIANTS,
    SceneDefinition,
    build_scene,
    get_variant,
)
from importstory.story.scenes.reveal import create_reveal_scene

__all__ = [
    "create_intro_scene",
    "create_change_bars_scene",
    "create_lines_scene",
    "create_explore_scene",
    "create_reveal_scene",
    "VARIANTS",
    "SceneDefinition",
    "build_scene",
    "get_variant",
]
