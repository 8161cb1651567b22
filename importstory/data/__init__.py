"""
Data module for the import story.

Contains schemas and the CSV loader that turns raw rows into typed records.
"""

from importstory.data.loader import (
    CsvDataLoader,
    DroppedRow,
    LoadResult,
    load_csv,
    load_rows,
    parse_record,
)
from importstory.data.schemas import (
    ChangeRecord,
    CountrySeries,
    DropReason,
    Metric,
    MonthPoint,
    RawRecord,
)

__all__ = [
    # Loading
    "CsvDataLoader",
    "DroppedRow",
    "LoadResult",
    "load_csv",
    "load_rows",
    "parse_record",
    # Schemas
    "ChangeRecord",
    "CountrySeries",
    "DropReason",
    "Metric",
    "MonthPoint",
    "RawRecord",
]
