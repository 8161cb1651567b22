"""
Module: pipeline

Purpose: Orchestrator for the data side of the story.

Key Functions:
- run_pipeline: Load, aggregate and compute changes with per-stage timing
- build_controller: Create the StoryController from a pipeline result
- PipelineConfig: Configuration for pipeline execution
- PipelineResult: Container for pipeline outputs

Architecture Notes:
- Data flows one way: rows -> records -> series -> change table
- Accepts either a file/URL source or already-read rows
- Everything here runs once; the controller only reads the result
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

from importstory.data.loader import LoadResult, load_csv, load_rows
from importstory.data.schemas import CountrySeries, Metric
from importstory.exceptions import InsufficientDataError
from importstory.features.aggregators import aggregate_series, date_extent
from importstory.features.changes import ChangeTable, build_change_table
from importstory.settings import Settings, get_settings
from importstory.story.overrides import load_overrides_safe
from importstory.story.state import StoryController

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================


@dataclass
class PipelineConfig:
    """Configuration for pipeline execution."""

    # Input
    delimiter: str = ","

    # Which metrics get change records
    metrics: tuple[Metric, ...] = tuple(Metric)

    # Minimum number of valid records required to build a story
    min_records: int = 1


@dataclass
class PipelineStageResult:
    """Result from a single pipeline stage."""

    stage_name: str
    success: bool
    duration_ms: float
    metrics: dict[str, Any] = field(default_factory=dict)
    error_message: str | None = None


@dataclass
class PipelineResult:
    """Complete pipeline execution result."""

    load_result: LoadResult
    series: list[CountrySeries]
    change_table: ChangeTable

    # Metadata
    config: PipelineConfig
    stage_results: list[PipelineStageResult] = field(default_factory=list)
    total_duration_ms: float = 0.0
    success: bool = True

    @property
    def countries(self) -> list[str]:
        return [s.country for s in self.series]

    def get_summary(self) -> dict[str, Any]:
        """Get summary of pipeline results."""
        extent = date_extent(self.series)
        return {
            "source": self.load_result.source,
            "rows_read": self.load_result.rows_read,
            "records": len(self.load_result.records),
            "dropped": self.load_result.dropped_count,
            "countries": len(self.series),
            "first_month": extent[0].isoformat() if extent else None,
            "last_month": extent[1].isoformat() if extent else None,
            "total_duration_ms": self.total_duration_ms,
            "success": self.success,
            "stages": [
                {
                    "name": s.stage_name,
                    "success": s.success,
                    "duration_ms": s.duration_ms,
                }
                for s in self.stage_results
            ],
        }


# =============================================================================
# PIPELINE EXECUTION
# =============================================================================


def _time_stage(stage_name: str, func: Callable[[], Any]) -> tuple[Any, PipelineStageResult]:
    """Execute a stage and time it."""
    logger.debug(f"Starting stage: {stage_name}")

    start = time.perf_counter()
    try:
        result = func()
    except Exception as e:
        duration = (time.perf_counter() - start) * 1000
        logger.error(f"Stage {stage_name} failed after {duration:.1f}ms: {e}")
        raise

    duration = (time.perf_counter() - start) * 1000
    logger.info(f"Completed stage: {stage_name} ({duration:.1f}ms)")
    return result, PipelineStageResult(stage_name=stage_name, success=True, duration_ms=duration)


def run_pipeline(
    source: str | Path | None = None,
    *,
    rows: Iterable[Mapping[Any, Any]] | None = None,
    config: PipelineConfig | None = None,
) -> PipelineResult:
    """
    Execute the data pipeline.

    Can accept data in two ways:
    1. source: Path or URL of a delimited file
    2. rows: Already-read rows (mappings keyed by column name)

    Args:
        source: File path or URL
        rows: Optional pre-read rows (takes precedence over source)
        config: Pipeline configuration

    Returns:
        PipelineResult with series and change table

    Raises:
        ValueError: If neither source nor rows is given
        DataLoadError: If the source cannot be read
        InsufficientDataError: If too few valid records survive loading
    """
    if source is None and rows is None:
        raise ValueError("run_pipeline needs a source or rows")

    config = config or PipelineConfig()
    start_time = time.perf_counter()
    stage_results: list[PipelineStageResult] = []

    # Stage 1: Load
    def load() -> LoadResult:
        if rows is not None:
            return load_rows(rows)
        return load_csv(source, delimiter=config.delimiter)

    load_result, stage = _time_stage("Load", load)
    stage.metrics = {
        "rows_read": load_result.rows_read,
        "records": len(load_result.records),
        "dropped": load_result.dropped_count,
        **{f"dropped_{reason.value}": n for reason, n in load_result.dropped_by_reason.items()},
    }
    stage_results.append(stage)

    if len(load_result.records) < config.min_records:
        raise InsufficientDataError(
            f"Only {len(load_result.records)} valid records after loading",
            required=config.min_records,
            actual=len(load_result.records),
            data_type="records",
        )

    # Stage 2: Aggregate
    series, stage = _time_stage("Aggregate", lambda: aggregate_series(load_result.records))
    stage.metrics = {"countries": len(series)}
    stage_results.append(stage)

    if not series:
        raise InsufficientDataError(
            "No country has a month with finite totals",
            required=1,
            actual=0,
            data_type="countries",
        )

    # Stage 3: Changes
    change_table, stage = _time_stage(
        "Changes", lambda: build_change_table(series, config.metrics)
    )
    stage.metrics = {"metrics": [m.value for m in config.metrics]}
    stage_results.append(stage)

    total = (time.perf_counter() - start_time) * 1000
    logger.info(f"Pipeline finished in {total:.1f}ms: {len(series)} countries")

    return PipelineResult(
        load_result=load_result,
        series=series,
        change_table=change_table,
        config=config,
        stage_results=stage_results,
        total_duration_ms=total,
    )


def build_controller(
    result: PipelineResult,
    settings: Settings | None = None,
    *,
    variant: str | None = None,
    overrides: dict[str, dict[str, str | None]] | None = None,
) -> StoryController:
    """
    Create the story controller for a pipeline result.

    Overrides default to the settings' narrative_overrides_path, if any.

    Args:
        result: Pipeline output
        settings: Story settings (defaults to get_settings())
        variant: Scene list name (defaults to settings.variant)
        overrides: Narrative overrides keyed by scene id

    Returns:
        Initialised StoryController
    """
    settings = settings or get_settings()
    if overrides is None:
        overrides = load_overrides_safe(settings.narrative_overrides_path)

    return StoryController(
        result.series,
        result.change_table,
        settings=settings,
        variant=variant,
        overrides=overrides,
    )
