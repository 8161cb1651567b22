"""
Module: state

Purpose: Story selection state and the controller that mutates it.

Key Classes:
- SceneNavigator: Clamped index over an ordered scene list
- StoryState: Active scene, metric, country, legend set and reveal latch
- StoryController: Single owner of state and derived data; dispatches actions
  and re-renders the active scene after every change

Architecture Notes:
- Derived data (series, change table) is built once and never mutated
- Scene builders read an immutable SceneContext snapshot
- Every state change re-renders the whole active scene
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from importstory.data.schemas import CountrySeries, Metric
from importstory.exceptions import (
    InsufficientDataError,
    SceneNavigationError,
    UnknownCountryError,
)
from importstory.features.aggregators import list_countries
from importstory.features.changes import ChangeTable
from importstory.settings import Settings, get_settings
from importstory.story.base import Scene, SceneContext
from importstory.story.scenes.registry import SceneDefinition, build_scene, get_variant

logger = logging.getLogger(__name__)


# =============================================================================
# NAVIGATION
# =============================================================================


class SceneNavigator:
    """Index into an ordered list of scenes, clamped at both ends."""

    def __init__(self, scene_count: int, index: int = 0):
        if scene_count < 1:
            raise SceneNavigationError(
                "A story needs at least one scene", index=index, scene_count=scene_count
            )
        self.scene_count = scene_count
        self.index = 0
        self.go_to(index)

    @property
    def at_start(self) -> bool:
        return self.index == 0

    @property
    def at_end(self) -> bool:
        return self.index == self.scene_count - 1

    def next(self) -> int:
        self.index = min(self.index + 1, self.scene_count - 1)
        return self.index

    def prev(self) -> int:
        self.index = max(self.index - 1, 0)
        return self.index

    def go_to(self, index: int) -> int:
        if not 0 <= index < self.scene_count:
            raise SceneNavigationError(
                f"Scene {index} is outside 0..{self.scene_count - 1}",
                index=index,
                scene_count=self.scene_count,
            )
        self.index = index
        return self.index


# =============================================================================
# STATE AND ACTIONS
# =============================================================================


@dataclass
class StoryState:
    """Mutable selection state; owned by StoryController."""

    navigator: SceneNavigator
    metric: Metric = Metric.QUANTITY
    selected_country: str | None = None
    top_n: int = 5
    revealed: bool = False
    active_countries: set[str] = field(default_factory=set)

    @property
    def scene_index(self) -> int:
        return self.navigator.index


@dataclass(frozen=True)
class NextScene:
    pass


@dataclass(frozen=True)
class PrevScene:
    pass


@dataclass(frozen=True)
class GoToScene:
    index: int


@dataclass(frozen=True)
class StartStory:
    """The "start" trigger: jump to the first scene after the intro."""


@dataclass(frozen=True)
class SetMetric:
    metric: Metric


@dataclass(frozen=True)
class SelectCountry:
    country: str


@dataclass(frozen=True)
class ToggleCountry:
    """Legend click: show or hide one country's line."""

    country: str


@dataclass(frozen=True)
class CompleteReveal:
    """Fired once when the reveal animation ends."""


Action = (
    NextScene | PrevScene | GoToScene | StartStory | SetMetric | SelectCountry
    | ToggleCountry | CompleteReveal
)


@dataclass(frozen=True)
class ControlState:
    """Affordances of the controls for the active scene."""

    scene_index: int
    scene_count: int
    prev_disabled: bool
    next_disabled: bool
    show_country_picker: bool
    show_start: bool
    exploration_enabled: bool
    metric: Metric
    selected_country: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "scene_index": self.scene_index,
            "scene_count": self.scene_count,
            "prev_disabled": self.prev_disabled,
            "next_disabled": self.next_disabled,
            "show_country_picker": self.show_country_picker,
            "show_start": self.show_start,
            "exploration_enabled": self.exploration_enabled,
            "metric": self.metric.value,
            "selected_country": self.selected_country,
        }


# =============================================================================
# CONTROLLER
# =============================================================================


class StoryController:
    """
    Owns the story state and derived data, and re-renders on every change.

    Usage:
        controller = StoryController(series, change_table)
        scene = controller.dispatch(NextScene())
        controller.dispatch(SetMetric(Metric.VALUE))
        controls = controller.controls()
    """

    def __init__(
        self,
        series: Sequence[CountrySeries],
        change_table: ChangeTable,
        *,
        settings: Settings | None = None,
        variant: str | None = None,
        overrides: dict[str, dict[str, str | None]] | None = None,
    ):
        """
        Initialize state once from the derived data.

        Args:
            series: Country series (at least one)
            change_table: Changes for every metric
            settings: Story settings (defaults to get_settings())
            variant: Scene list name; defaults to settings.variant
            overrides: Narrative overrides keyed by scene id

        Raises:
            InsufficientDataError: If there are no series
            KeyError: If the variant is unknown
        """
        if not series:
            raise InsufficientDataError(
                "Cannot build a story without any country series",
                required=1,
                actual=0,
                data_type="country_series",
            )

        self.settings = settings or get_settings()
        self.variant = variant or self.settings.variant
        self.scenes: tuple[SceneDefinition, ...] = get_variant(self.variant)
        self.series = tuple(series)
        self.change_table = change_table
        self.countries = list_countries(self.series)
        self.overrides = overrides or {}

        metric = self.settings.default_metric
        self.state = StoryState(
            navigator=SceneNavigator(len(self.scenes)),
            metric=metric,
            selected_country=(
                change_table.greatest_pct_country(metric) or self.series[0].country
            ),
            top_n=self.settings.top_n,
            active_countries=set(self.countries),
        )
        self.current_scene = self.render()

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    @property
    def active_definition(self) -> SceneDefinition:
        return self.scenes[self.state.scene_index]

    def context(
        self,
        *,
        metric: Metric | None = None,
        selected_country: str | None = None,
        revealed: bool | None = None,
    ) -> SceneContext:
        """Snapshot the state, optionally overriding metric, country or reveal."""
        metric = metric or self.state.metric
        return SceneContext(
            metric=metric,
            series=self.series,
            changes=tuple(self.change_table.for_metric(metric)),
            settings=self.settings,
            selected_country=selected_country or self.state.selected_country,
            top_n=self.state.top_n,
            revealed=self.state.revealed if revealed is None else revealed,
            active_countries=frozenset(self.state.active_countries),
            variant=self.variant,
        )

    def render_definition(self, definition: SceneDefinition, ctx: SceneContext) -> Scene:
        return build_scene(definition, ctx, self.overrides)

    def render(self) -> Scene:
        """Rebuild the active scene from scratch."""
        definition = self.active_definition
        logger.debug(f"Rendering scene {self.state.scene_index} ({definition.scene_id})")
        self.current_scene = self.render_definition(definition, self.context())
        return self.current_scene

    def controls(self) -> ControlState:
        definition = self.active_definition
        navigator = self.state.navigator
        return ControlState(
            scene_index=navigator.index,
            scene_count=navigator.scene_count,
            prev_disabled=navigator.at_start,
            next_disabled=navigator.at_end,
            show_country_picker=definition.shows_country_picker,
            show_start=definition.shows_start,
            exploration_enabled=self.exploration_enabled,
            metric=self.state.metric,
            selected_country=self.state.selected_country,
        )

    @property
    def exploration_enabled(self) -> bool:
        """Tooltips and legend are live unless the active scene awaits its reveal."""
        return self.state.revealed or not self.active_definition.gated_by_reveal

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def dispatch(self, action: Action) -> Scene:
        """
        Apply an action and re-render the active scene.

        Returns:
            The freshly rendered active scene (unchanged if the action was ignored)

        Raises:
            SceneNavigationError: GoToScene outside the scene list
            UnknownCountryError: SelectCountry with a country not in the data
        """
        state = self.state

        if isinstance(action, NextScene):
            state.navigator.next()
        elif isinstance(action, PrevScene):
            state.navigator.prev()
        elif isinstance(action, GoToScene):
            state.navigator.go_to(action.index)
        elif isinstance(action, StartStory):
            state.navigator.go_to(min(1, state.navigator.scene_count - 1))
        elif isinstance(action, SetMetric):
            state.metric = Metric(action.metric)
        elif isinstance(action, SelectCountry):
            if action.country not in self.countries:
                raise UnknownCountryError(
                    f"Country {action.country!r} is not in the data", country=action.country
                )
            state.selected_country = action.country
        elif isinstance(action, ToggleCountry):
            if not self.exploration_enabled:
                logger.debug(f"Ignoring legend toggle for {action.country}: not revealed yet")
                return self.current_scene
            if action.country in state.active_countries:
                state.active_countries.discard(action.country)
            elif action.country in self.countries:
                state.active_countries.add(action.country)
            else:
                raise UnknownCountryError(
                    f"Country {action.country!r} is not in the data", country=action.country
                )
        elif isinstance(action, CompleteReveal):
            state.revealed = True
        else:
            raise TypeError(f"Unsupported action: {action!r}")

        return self.render()

    # Convenience wrappers

    def next(self) -> Scene:
        return self.dispatch(NextScene())

    def prev(self) -> Scene:
        return self.dispatch(PrevScene())

    def go_to(self, index: int) -> Scene:
        return self.dispatch(GoToScene(index))

    def start(self) -> Scene:
        return self.dispatch(StartStory())

    def set_metric(self, metric: Metric | str) -> Scene:
        return self.dispatch(SetMetric(Metric(metric)))

    def select_country(self, country: str) -> Scene:
        return self.dispatch(SelectCountry(country))

    def toggle_country(self, country: str) -> Scene:
        return self.dispatch(ToggleCountry(country))

    def complete_reveal(self) -> Scene:
        return self.dispatch(CompleteReveal())
