"""
Tests for importstory/story/renderers/html.py
"""

import json
import re
from pathlib import Path

import pytest

from importstory.exceptions import DataLoadError
from importstory.story.renderers.html import (
    build_story_payload,
    render_error_html,
    render_story_html,
    save_story_html,
)
from importstory.story.state import StoryController


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def slideshow(market_series, market_table, settings) -> StoryController:
    return StoryController(market_series, market_table, settings=settings, variant="slideshow")


@pytest.fixture
def reveal(market_series, market_table, settings) -> StoryController:
    return StoryController(market_series, market_table, settings=settings, variant="reveal")


def extract_payload(html: str) -> dict:
    """Pull the embedded STORY_DATA JSON back out of a rendered page."""
    match = re.search(r"window\.STORY_DATA = (.*?);\n", html)
    assert match, "payload script not found"
    return json.loads(match.group(1))


# =============================================================================
# PAYLOAD TESTS
# =============================================================================


class TestBuildStoryPayload:
    """Tests for payload precomputation."""

    def test_covers_every_metric(self, slideshow: StoryController) -> None:
        payload = build_story_payload(slideshow)

        assert [s["scene_id"] for s in payload["scenes"]] == [
            "intro", "change_bars", "lines", "explore",
        ]
        for scene in payload["scenes"]:
            assert set(scene["renders"]) == {"quantity", "value"}

    def test_explore_covers_every_country(self, slideshow: StoryController) -> None:
        explore = build_story_payload(slideshow)["scenes"][3]
        assert explore["shows_country_picker"]
        for metric in ("quantity", "value"):
            renders = explore["renders"][metric]
            assert set(renders) == set(slideshow.countries)
            assert renders["Peru"]["key_metrics"]["country"] == "Peru"

    def test_reveal_has_both_states(self, reveal: StoryController) -> None:
        scene = build_story_payload(reveal)["scenes"][1]
        assert scene["gated_by_reveal"]
        renders = scene["renders"]["value"]
        assert renders["locked"]["chart"]["interactions"]["legend"] is False
        assert renders["revealed"]["chart"]["interactions"]["legend"] is True

    def test_does_not_change_state(self, reveal: StoryController) -> None:
        build_story_payload(reveal)
        assert reveal.state.scene_index == 0
        assert not reveal.state.revealed

    def test_initial_controls(self, slideshow: StoryController) -> None:
        payload = build_story_payload(slideshow)
        assert payload["initial"]["selected_country"] == "Jordan"
        assert payload["countries"] == slideshow.countries
        assert [m["value"] for m in payload["metrics"]] == ["quantity", "value"]


# =============================================================================
# HTML TESTS
# =============================================================================


class TestRenderStoryHtml:
    """Tests for the full HTML document."""

    def test_document_structure(self, slideshow: StoryController, settings) -> None:
        html = render_story_html(slideshow)

        assert html.startswith("<!DOCTYPE html>")
        assert f"<title>{settings.title}</title>" in html
        assert "d3@7/dist/d3.min.js" in html
        assert "d3-svg-annotation@2.5.1/indexRollup.min.js" in html
        assert "d3.annotationCalloutElbow" in html
        for control_id in ('id="prev"', 'id="next"', 'id="start"', 'id="countrySelect"'):
            assert control_id in html
        assert html.count('type="radio" name="metric"') == 2

    def test_payload_round_trips(self, slideshow: StoryController) -> None:
        payload = extract_payload(render_story_html(slideshow))
        assert payload == json.loads(json.dumps(build_story_payload(slideshow)))

    def test_script_safe_json(self, slideshow: StoryController) -> None:
        html = render_story_html(slideshow)
        payload_line = re.search(r"window\.STORY_DATA = .*", html).group(0)
        assert "</" not in payload_line

    def test_title_is_escaped(self, market_series, market_table, settings) -> None:
        custom = settings.model_copy(update={"title": "Imports <2024>"})
        controller = StoryController(market_series, market_table, settings=custom)
        html = render_story_html(controller)
        assert "<h1>Imports &lt;2024&gt;</h1>" in html


class TestErrorPage:
    """Tests for the load-failure page."""

    def test_shows_message_and_source(self) -> None:
        error = DataLoadError("Data file not found: data/x.csv", source="data/x.csv")
        html = render_error_html(error)

        assert 'role="alert"' in html
        assert "Data file not found: data/x.csv" in html
        assert "<code>data/x.csv</code>" in html
        assert "DataLoadError" in html

    def test_generic_exception(self) -> None:
        html = render_error_html(OSError("disk on fire"))
        assert "disk on fire" in html
        assert "Source:" not in html


class TestSaveStoryHtml:
    def test_creates_parent_dirs(self, tmp_path: Path) -> None:
        path = save_story_html("<html></html>", tmp_path / "nested" / "story.html")
        assert path.read_text(encoding="utf-8") == "<html></html>"
