"""
Story renderers.

- html: standalone HTML page with embedded D3 scenes
"""

from importstory.story.renderers.html import (
    build_story_payload,
    render_error_html,
    render_story_html,
    save_story_html,
)

__all__ = [
    "build_story_payload",
    "render_error_html",
    "render_story_html",
    "save_story_html",
]
