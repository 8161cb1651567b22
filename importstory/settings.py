"""
Module: settings

Purpose: Centralized configuration management for the import story.

Key Functions:
- get_settings: Load settings from environment variables
- Settings: Pydantic settings model with validation

Architecture Notes:
- Uses pydantic-settings for type-safe configuration
- All settings have sensible defaults
- Environment variables (IMPORTSTORY_*) override defaults
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from importstory.data.schemas import Metric


class Settings(BaseSettings):
    """Runtime settings for loading data and building the story."""

    model_config = SettingsConfigDict(
        env_prefix="IMPORTSTORY_",
        env_file=".env",
        extra="ignore",
    )

    # Input / output
    data_path: str = "data/imports.csv"
    output_path: str = "output/story.html"

    # Story
    variant: Literal["slideshow", "reveal"] = "slideshow"
    default_metric: Metric = Metric.QUANTITY
    top_n: int = Field(default=5, ge=1)
    title: str = "US Apparel Imports"
    subtitle: str = "Risers & Decliners by Country"

    # Baseline filter (share of positive first values to cut, None disables)
    bars_baseline_percentile: float | None = Field(default=0.2, ge=0.0, le=1.0)
    lines_baseline_percentile: float | None = Field(default=None, ge=0.0, le=1.0)

    # Chart geometry
    chart_width: int = 880
    chart_height: int = 500
    margin_top: int = 30
    margin_right: int = 20
    margin_bottom: int = 40
    margin_left: int = 60

    # Reveal variant
    reveal_duration_ms: int = Field(default=2500, ge=0)

    # Rendering
    cdn_base: str = "https://cdn.jsdelivr.net/npm"
    narrative_overrides_path: str | None = None

    log_level: str = "INFO"

    @property
    def margins(self) -> dict[str, int]:
        """Chart margins in the shape the page script expects."""
        return {
            "top": self.margin_top,
            "right": self.margin_right,
            "bottom": self.margin_bottom,
            "left": self.margin_left,
        }


@lru_cache
def get_settings() -> Settings:
    """Return process-wide settings (environment read once)."""
    return Settings()
