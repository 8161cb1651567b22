"""
D3 chart specifications for story scenes.

This module provides functions to create ChartSpec objects for each
visualization type. The specs contain the data and configuration that
the D3.js code needs to render the charts.
"""

from importstory.story.charts.bars import create_change_bars_spec
from importstory.story.charts.lines import (
    TABLEAU10,
    create_country_trend_spec,
    create_title_card_spec,
    create_trend_lines_spec,
)

__all__ = [
    "TABLEAU10",
    "create_change_bars_spec",
    "create_country_trend_spec",
    "create_title_card_spec",
    "create_trend_lines_spec",
]
