"""
Reporting module for the import story.

Contains static (matplotlib) renditions of the story scenes.
"""

from importstory.reporting.visuals import (
    close_figure,
    plot_change_bars,
    plot_country_trend,
    plot_scene,
    plot_title_card,
    plot_trend_lines,
    save_figure,
    save_scene_snapshots,
    set_style,
)

__all__ = [
    "close_figure",
    "plot_change_bars",
    "plot_country_trend",
    "plot_scene",
    "plot_title_card",
    "plot_trend_lines",
    "save_figure",
    "save_scene_snapshots",
    "set_style",
]
