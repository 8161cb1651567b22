"""
Module: visuals

Purpose: Static matplotlib renditions of story scenes.

Key Functions:
- plot_change_bars: Diverging bars from a diverging_bar ChartSpec
- plot_trend_lines: Multi-line trends from a multi_line ChartSpec
- plot_country_trend: One country's trend from a single_line ChartSpec
- plot_scene: Dispatch on the scene's chart type
- save_scene_snapshots: Write one PNG per scene

Architecture Notes:
- Uses matplotlib and seaborn
- Reads the same ChartSpec the D3 page reads, so snapshots match the page
- Returns figure objects for notebook integration
"""

import logging
from pathlib import Path
from typing import Iterable

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from matplotlib.figure import Figure
from matplotlib.ticker import FuncFormatter

from importstory.story.base import ChartSpec, Scene
from importstory.story.narratives import format_si

logger = logging.getLogger(__name__)

PX_PER_INCH = 100


# =============================================================================
# CONFIGURATION
# =============================================================================


def set_style(style: str = "whitegrid") -> None:
    """Set the default plotting style."""
    sns.set_style(style)
    plt.rcParams["figure.figsize"] = (10, 6)
    plt.rcParams["font.size"] = 10


def _figsize(spec: ChartSpec) -> tuple[float, float]:
    width = spec.config.get("width", 880)
    height = spec.config.get("height", 500)
    return (width / PX_PER_INCH, height / PX_PER_INCH)


def _si_formatter(signed: bool = False) -> FuncFormatter:
    return FuncFormatter(lambda v, _pos: format_si(v, signed=signed))


def _annotate(ax, spec: ChartSpec, to_xy) -> None:
    """Draw the spec's callouts; to_xy maps an Annotation to data coordinates."""
    for annotation in spec.annotations:
        xy = to_xy(annotation)
        if xy is None:
            continue
        ax.annotate(
            f"{annotation.title}\n{annotation.label}",
            xy=xy,
            xytext=(annotation.dx, -annotation.dy),
            textcoords="offset points",
            fontsize=9,
            ha="right" if annotation.dx < 0 else "left",
            arrowprops={"arrowstyle": "-", "color": "#333333", "lw": 0.8},
        )


# =============================================================================
# CHART PLOTS
# =============================================================================


def plot_change_bars(spec: ChartSpec, *, title: str | None = None) -> Figure:
    """
    Plot absolute change as horizontal diverging bars.

    Args:
        spec: A diverging_bar ChartSpec
        title: Optional chart title

    Returns:
        matplotlib Figure
    """
    fig, ax = plt.subplots(figsize=_figsize(spec))

    bars = spec.data.get("bars", [])
    countries = [b["country"] for b in bars]
    values = [b["change_abs"] for b in bars]
    colors = [
        spec.config["riseColor"] if b["direction"] == "rise" else spec.config["declineColor"]
        for b in bars
    ]

    positions = np.arange(len(bars))
    ax.barh(positions, values, color=colors)
    ax.set_yticks(positions)
    ax.set_yticklabels(countries)
    # First bar at the top, like the page
    ax.invert_yaxis()

    if spec.config.get("zeroLine"):
        ax.axvline(x=0, color="#666666", linestyle="--", linewidth=1)

    ax.xaxis.set_major_formatter(_si_formatter(signed=True))
    ax.set_xlabel(f"Change in {spec.config.get('metric', 'value')}")

    index = {country: i for i, country in enumerate(countries)}
    _annotate(ax, spec, lambda a: (a.x, index[a.y]) if a.y in index else None)

    if title:
        ax.set_title(title)
    plt.tight_layout()
    return fig


def plot_trend_lines(spec: ChartSpec, *, title: str | None = None) -> Figure:
    """
    Plot monthly trends, one line per country.

    Hidden lines (legend toggled off) are skipped.

    Args:
        spec: A multi_line ChartSpec
        title: Optional chart title

    Returns:
        matplotlib Figure
    """
    fig, ax = plt.subplots(figsize=_figsize(spec))

    drawn = 0
    for line in spec.data.get("lines", []):
        if line.get("hidden"):
            continue
        frame = pd.DataFrame(line["points"])
        if frame.empty:
            continue
        ax.plot(
            pd.to_datetime(frame["date"]),
            frame["value"],
            color=line["color"],
            linewidth=2,
            label=line["country"],
        )
        drawn += 1

    ax.set_ylim(bottom=0)
    ax.yaxis.set_major_formatter(_si_formatter())
    ax.set_ylabel(str(spec.config.get("metric", "value")).title())
    if drawn:
        ax.legend(loc="upper left", fontsize=8, frameon=False)

    _annotate(ax, spec, lambda a: (pd.Timestamp(a.x), a.y))

    if title:
        ax.set_title(title)
    fig.autofmt_xdate()
    plt.tight_layout()
    return fig


def plot_country_trend(spec: ChartSpec, *, title: str | None = None) -> Figure:
    """Plot a single country's trend with point markers."""
    fig, ax = plt.subplots(figsize=_figsize(spec))

    frame = pd.DataFrame(spec.data.get("points", []))
    if not frame.empty:
        ax.plot(
            pd.to_datetime(frame["date"]),
            frame["value"],
            color=spec.data.get("color"),
            marker="o",
            markersize=spec.config.get("pointRadius", 3),
            linewidth=2,
        )

    ax.set_ylim(bottom=0)
    ax.yaxis.set_major_formatter(_si_formatter())
    ax.set_ylabel(str(spec.config.get("metric", "value")).title())
    _annotate(ax, spec, lambda a: (pd.Timestamp(a.x), a.y))

    ax.set_title(title or spec.data.get("country", ""))
    fig.autofmt_xdate()
    plt.tight_layout()
    return fig


def plot_title_card(spec: ChartSpec) -> Figure:
    """Plot the intro title card."""
    fig, ax = plt.subplots(figsize=_figsize(spec))
    ax.axis("off")
    ax.text(0.5, 0.55, spec.data.get("title", ""), ha="center", va="center",
            fontsize=spec.config.get("titleSize", 28), fontweight="bold")
    ax.text(0.5, 0.42, spec.data.get("subtitle", ""), ha="center", va="center",
            fontsize=spec.config.get("subtitleSize", 18))
    return fig


PLOTTERS = {
    "diverging_bar": plot_change_bars,
    "multi_line": plot_trend_lines,
    "single_line": plot_country_trend,
}


def plot_scene(scene: Scene) -> Figure:
    """
    Plot a scene's chart.

    Args:
        scene: Rendered scene

    Returns:
        matplotlib Figure

    Raises:
        ValueError: If the chart type has no static rendition
    """
    chart_type = scene.chart.chart_type
    if chart_type == "title_card":
        return plot_title_card(scene.chart)
    if chart_type not in PLOTTERS:
        raise ValueError(f"No static plot for chart type {chart_type!r}")
    return PLOTTERS[chart_type](scene.chart, title=scene.narrative.headline)


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def save_figure(
    fig: Figure,
    filepath: str | Path,
    *,
    dpi: int = 150,
    bbox_inches: str = "tight",
) -> None:
    """
    Save figure to file.

    Args:
        fig: Figure to save
        filepath: Path to save to
        dpi: Resolution
        bbox_inches: Bounding box option
    """
    fig.savefig(filepath, dpi=dpi, bbox_inches=bbox_inches)


def close_figure(fig: Figure) -> None:
    """Close a figure to free memory."""
    plt.close(fig)


def save_scene_snapshots(scenes: Iterable[Scene], directory: str | Path) -> list[Path]:
    """
    Write one PNG per scene, named by position and scene id.

    Args:
        scenes: Rendered scenes in story order
        directory: Output directory (created if missing)

    Returns:
        Paths written
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    written = []
    for i, scene in enumerate(scenes):
        fig = plot_scene(scene)
        path = directory / f"{i:02d}_{scene.scene_id}.png"
        try:
            save_figure(fig, path)
        finally:
            close_figure(fig)
        written.append(path)

    logger.info(f"Saved {len(written)} scene snapshots to {directory}")
    return written
