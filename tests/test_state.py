"""
Tests for importstory/story/state.py

Navigation clamping, control affordances, the reveal latch and legend toggling.
"""

import pytest

from importstory.data.schemas import Metric
from importstory.exceptions import (
    InsufficientDataError,
    SceneNavigationError,
    UnknownCountryError,
)
from importstory.features.changes import build_change_table
from importstory.story.state import (
    CompleteReveal,
    GoToScene,
    NextScene,
    PrevScene,
    SceneNavigator,
    SelectCountry,
    SetMetric,
    StartStory,
    StoryController,
    ToggleCountry,
)


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def slideshow(market_series, market_table, settings) -> StoryController:
    return StoryController(market_series, market_table, settings=settings, variant="slideshow")


@pytest.fixture
def reveal(market_series, market_table, settings) -> StoryController:
    return StoryController(market_series, market_table, settings=settings, variant="reveal")


# =============================================================================
# NAVIGATOR TESTS
# =============================================================================


class TestSceneNavigator:
    """Tests for SceneNavigator clamping."""

    def test_prev_clamps_at_zero(self) -> None:
        nav = SceneNavigator(4)
        for _ in range(5):
            nav.prev()
        assert nav.index == 0
        assert nav.at_start

    def test_next_clamps_at_last(self) -> None:
        nav = SceneNavigator(4, index=3)
        for _ in range(5):
            nav.next()
        assert nav.index == 3
        assert nav.at_end

    def test_go_to(self) -> None:
        nav = SceneNavigator(4)
        assert nav.go_to(2) == 2

    @pytest.mark.parametrize("index", [-1, 4])
    def test_go_to_out_of_range(self, index: int) -> None:
        nav = SceneNavigator(4)
        with pytest.raises(SceneNavigationError) as exc_info:
            nav.go_to(index)
        assert exc_info.value.scene_count == 4
        assert nav.index == 0

    def test_needs_a_scene(self) -> None:
        with pytest.raises(SceneNavigationError):
            SceneNavigator(0)


# =============================================================================
# CONTROLLER TESTS
# =============================================================================


class TestStoryController:
    """Tests for StoryController initialisation and dispatch."""

    def test_initial_state(self, slideshow: StoryController) -> None:
        assert slideshow.state.scene_index == 0
        assert slideshow.state.metric == Metric.QUANTITY
        # Largest percentage riser by quantity
        assert slideshow.state.selected_country == "Jordan"
        assert slideshow.state.active_countries == set(slideshow.countries)
        assert slideshow.current_scene.scene_id == "intro"

    def test_countries_sorted(self, slideshow: StoryController) -> None:
        assert slideshow.countries == ["China", "India", "Jordan", "Mexico", "Peru", "Vietnam"]

    def test_requires_series(self, settings) -> None:
        with pytest.raises(InsufficientDataError):
            StoryController([], build_change_table([]), settings=settings)

    def test_unknown_variant(self, market_series, market_table, settings) -> None:
        with pytest.raises(KeyError):
            StoryController(market_series, market_table, settings=settings, variant="carousel")

    def test_walk_through_slideshow(self, slideshow: StoryController) -> None:
        visited = [slideshow.current_scene.scene_id]
        for _ in range(5):
            visited.append(slideshow.dispatch(NextScene()).scene_id)
        assert visited == ["intro", "change_bars", "lines", "explore", "explore", "explore"]

        slideshow.dispatch(PrevScene())
        assert slideshow.current_scene.scene_id == "lines"

    def test_go_to_scene(self, slideshow: StoryController) -> None:
        assert slideshow.dispatch(GoToScene(3)).scene_id == "explore"
        with pytest.raises(SceneNavigationError):
            slideshow.dispatch(GoToScene(9))

    def test_set_metric_rerenders(self, slideshow: StoryController) -> None:
        slideshow.go_to(1)
        before = slideshow.current_scene.chart.config["metric"]
        scene = slideshow.dispatch(SetMetric(Metric.VALUE))
        assert (before, scene.chart.config["metric"]) == ("quantity", "value")
        assert slideshow.set_metric("quantity").chart.config["metric"] == "quantity"

    def test_select_country(self, slideshow: StoryController) -> None:
        slideshow.go_to(3)
        scene = slideshow.dispatch(SelectCountry("Mexico"))
        assert scene.key_metrics["country"] == "Mexico"

    def test_select_unknown_country(self, slideshow: StoryController) -> None:
        with pytest.raises(UnknownCountryError) as exc_info:
            slideshow.select_country("Atlantis")
        assert exc_info.value.country == "Atlantis"
        assert slideshow.state.selected_country == "Jordan"

    def test_unsupported_action(self, slideshow: StoryController) -> None:
        with pytest.raises(TypeError):
            slideshow.dispatch("next")


class TestControls:
    """Tests for control affordances."""

    def test_slideshow_controls(self, slideshow: StoryController) -> None:
        controls = slideshow.controls()
        assert controls.prev_disabled and not controls.next_disabled
        assert not controls.show_country_picker
        assert not controls.show_start

        slideshow.go_to(3)
        controls = slideshow.controls()
        assert controls.next_disabled and not controls.prev_disabled
        assert controls.show_country_picker

    def test_reveal_intro_shows_start(self, reveal: StoryController) -> None:
        controls = reveal.controls()
        assert controls.show_start
        assert controls.to_dict()["metric"] == "quantity"

    def test_start_goes_to_first_content_scene(self, reveal: StoryController) -> None:
        assert reveal.dispatch(StartStory()).scene_id == "reveal"


class TestRevealLatch:
    """Tests for the one-way reveal latch and legend set."""

    def test_locked_until_reveal(self, reveal: StoryController) -> None:
        scene = reveal.start()
        assert not reveal.exploration_enabled
        assert scene.chart.interactions == {"tooltips": False, "legend": False}
        assert scene.chart.transitions[0]["on_end"] == "complete_reveal"

    def test_complete_reveal_unlocks(self, reveal: StoryController) -> None:
        reveal.start()
        scene = reveal.dispatch(CompleteReveal())
        assert reveal.exploration_enabled
        assert scene.chart.interactions == {"tooltips": True, "legend": True}
        assert scene.chart.transitions == []

    def test_latch_survives_navigation(self, reveal: StoryController) -> None:
        reveal.start()
        reveal.complete_reveal()
        reveal.prev()
        scene = reveal.next()
        assert reveal.state.revealed
        assert scene.key_metrics["revealed"]

    def test_toggle_before_reveal_is_ignored(self, reveal: StoryController) -> None:
        before = reveal.start()
        after = reveal.dispatch(ToggleCountry("China"))
        assert after is before
        assert "China" in reveal.state.active_countries

    def test_toggle_after_reveal(self, reveal: StoryController) -> None:
        reveal.start()
        reveal.complete_reveal()

        scene = reveal.toggle_country("China")
        assert "China" not in reveal.state.active_countries
        assert scene.key_metrics["hidden_countries"] == ["China"]

        scene = reveal.toggle_country("China")
        assert "China" in reveal.state.active_countries
        assert scene.key_metrics["hidden_countries"] == []

    def test_toggle_unknown_country(self, reveal: StoryController) -> None:
        reveal.start()
        reveal.complete_reveal()
        with pytest.raises(UnknownCountryError):
            reveal.toggle_country("Atlantis")
