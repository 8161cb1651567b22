"""
Story module for the imports scrollytelling page.

Turns country series and change metrics into an ordered list of scenes,
each with narrative text and a D3 chart specification.

Key components:
- base: Core dataclasses (Scene, SceneNarrative, ChartSpec, Annotation, SceneContext)
- narratives: Auto-generate scene text from rankings
- overrides: Load/apply manual narrative overrides from YAML
- charts: D3 chart specifications for each visualization type
- scenes: Scene builders and the per-variant scene lists
- state: Navigation, selection state and the StoryController
- renderers: HTML rendering with Jinja2 templates

Example usage:
    from importstory.story import StoryController
    from importstory.story.renderers import render_story_html

    controller = StoryController(series, change_table, variant="slideshow")
    controller.next()
    html = render_story_html(controller)
"""

from importstory.story.base import (
    Annotation,
    ChartSpec,
    Scene,
    SceneContext,
    SceneNarrative,
)
from importstory.story.state import (
    CompleteReveal,
    ControlState,
    GoToScene,
    NextScene,
    PrevScene,
    SceneNavigator,
    SelectCountry,
    SetMetric,
    StartStory,
    StoryController,
    StoryState,
    ToggleCountry,
)

__all__ = [
    # Core dataclasses
    "Annotation",
    "ChartSpec",
    "Scene",
    "SceneContext",
    "SceneNarrative",
    # State
    "SceneNavigator",
    "StoryState",
    "StoryController",
    "ControlState",
    # Actions
    "NextScene",
    "PrevScene",
    "GoToScene",
    "StartStory",
    "SetMetric",
    "SelectCountry",
    "ToggleCountry",
    "CompleteReveal",
]
