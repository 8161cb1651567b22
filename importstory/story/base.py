"""
Base dataclasses for the import story.

This module defines the core data structures for scene generation:
- SceneNarrative: Auto-generated scene text with manual override support
- Annotation: A callout anchored at a data coordinate
- ChartSpec: D3 chart specification with data and config
- Scene: One step of the story (text + chart)
- SceneContext: Immutable snapshot of everything a scene builder reads
"""

from dataclasses import dataclass, field
from typing import Any

from importstory.data.schemas import ChangeRecord, CountrySeries, Metric
from importstory.settings import Settings


@dataclass
class SceneNarrative:
    """Auto-generated text for a scene, with manual override support.

    The text is generated from the data but can be overridden via YAML.
    """

    scene_id: str

    # Auto-generated from data
    auto_headline: str = ""
    auto_body: str = ""

    # Manual overrides (None = use auto-generated)
    override_headline: str | None = None
    override_body: str | None = None

    @property
    def headline(self) -> str:
        """Get headline, preferring override if set."""
        return self.override_headline if self.override_headline is not None else self.auto_headline

    @property
    def body(self) -> str:
        """Get body text, preferring override if set."""
        return self.override_body if self.override_body is not None else self.auto_body

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "scene_id": self.scene_id,
            "headline": self.headline,
            "body": self.body,
            "has_overrides": self.override_headline is not None or self.override_body is not None,
        }


@dataclass(frozen=True)
class Annotation:
    """A callout anchored at a data coordinate.

    x and y are in data space (a date string, a number or a category);
    the drawing code maps them through its scales and offsets by dx/dy pixels.
    """

    title: str
    label: str
    x: Any
    y: Any
    dx: int = 0
    dy: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "label": self.label,
            "x": self.x,
            "y": self.y,
            "dx": self.dx,
            "dy": self.dy,
        }


@dataclass
class ChartSpec:
    """Specification for a D3 chart.

    Contains the data and configuration needed to render a chart.
    The actual rendering is done by JavaScript; this just provides the spec.
    """

    chart_id: str
    chart_type: str  # "title_card", "diverging_bar", "multi_line", "single_line"

    # Data for the chart (will be JSON-serialized)
    data: dict[str, Any] = field(default_factory=dict)

    # Chart configuration
    config: dict[str, Any] = field(default_factory=dict)

    # Annotations to show on the chart
    annotations: list[Annotation] = field(default_factory=list)

    # One-shot transitions played when the chart is drawn
    transitions: list[dict[str, Any]] = field(default_factory=list)

    # Which interactions are live: tooltips, legend
    interactions: dict[str, bool] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "chart_id": self.chart_id,
            "chart_type": self.chart_type,
            "data": self.data,
            "config": self.config,
            "annotations": [a.to_dict() for a in self.annotations],
            "transitions": self.transitions,
            "interactions": self.interactions,
        }


@dataclass
class Scene:
    """A single rendered step of the story."""

    scene_id: str
    title: str
    narrative: SceneNarrative
    chart: ChartSpec

    # Key numbers behind the scene (for tests, snapshots and the appendix)
    key_metrics: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "scene_id": self.scene_id,
            "title": self.title,
            "narrative": self.narrative.to_dict(),
            "chart": self.chart.to_dict(),
            "key_metrics": self.key_metrics,
        }


@dataclass(frozen=True)
class SceneContext:
    """Everything a scene builder may read.

    Builders are pure functions of this snapshot, so the same context
    always produces the same Scene.
    """

    metric: Metric
    series: tuple[CountrySeries, ...]
    changes: tuple[ChangeRecord, ...]
    settings: Settings
    selected_country: str | None = None
    top_n: int = 5
    revealed: bool = False
    active_countries: frozenset[str] = frozenset()
    variant: str = "slideshow"

    def find_series(self, country: str | None) -> CountrySeries | None:
        """Series for a country, or None."""
        return next((s for s in self.series if s.country == country), None)
