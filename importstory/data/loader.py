"""
CSV data loader for monthly import figures.

Converts delimited files (or already-parsed row mappings) into typed
RawRecord objects for the aggregation pipeline. Rows that fail validation
are dropped and counted by reason rather than raised.
"""

import logging
import math
import numbers
import time
from collections import Counter
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR
from pathlib import Path
from typing import Any, Iterable, Mapping

import pandas as pd

from importstory.data.schemas import DropReason, RawRecord
from importstory.exceptions import (
    DataLoadError,
    DataValidationError,
    MissingFieldError,
    TypeMismatchError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# COLUMN MAPPING
# =============================================================================

# Canonical field name -> header in the source file
REQUIRED_COLUMNS: dict[str, str] = {
    "country": "Country",
    "year": "Year",
    "month": "Month",
    "quantity": "Quantity",
    "value": "Value",
}

URL_PREFIXES = ("http://", "https://", "ftp://", "s3://")


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class DroppedRow:
    """A row excluded from the dataset."""

    row_number: int
    reason: DropReason
    field: str | None = None
    detail: str = ""


@dataclass
class LoadResult:
    """Result of loading raw import rows."""

    records: list[RawRecord] = field(default_factory=list)

    # Statistics
    source: str | None = None
    rows_read: int = 0
    dropped_by_reason: dict[DropReason, int] = field(default_factory=dict)
    dropped_rows: list[DroppedRow] = field(default_factory=list)
    load_duration_ms: float = 0.0

    @property
    def dropped_count(self) -> int:
        return len(self.dropped_rows)

    @property
    def countries(self) -> set[str]:
        return {r.country for r in self.records}


# =============================================================================
# ROW PARSING
# =============================================================================


def _is_blank(raw: Any) -> bool:
    if raw is None:
        return True
    if isinstance(raw, str):
        return not raw.strip()
    if isinstance(raw, float):
        return math.isnan(raw)
    return False


def _coerce_number(raw: Any, field_name: str, row_number: int) -> float:
    """Coerce a numeric-looking cell to float."""
    if isinstance(raw, bool):
        raise TypeMismatchError(
            f"{field_name} must be numeric, got a boolean",
            field=field_name, value=raw, row_number=row_number,
        )
    if isinstance(raw, numbers.Real):
        number = float(raw)
    elif isinstance(raw, str):
        try:
            number = float(raw.strip())
        except ValueError:
            raise TypeMismatchError(
                f"{field_name} is not a number: {raw!r}",
                field=field_name, value=raw, row_number=row_number,
            ) from None
    else:
        raise TypeMismatchError(
            f"{field_name} has unsupported type {type(raw).__name__}",
            field=field_name, value=raw, row_number=row_number,
        )

    if not math.isfinite(number):
        raise TypeMismatchError(
            f"{field_name} must be finite, got {raw!r}",
            field=field_name, value=raw, row_number=row_number,
        )
    return number


def _coerce_int(raw: Any, field_name: str, row_number: int) -> int:
    number = _coerce_number(raw, field_name, row_number)
    if not number.is_integer():
        raise TypeMismatchError(
            f"{field_name} must be a whole number, got {raw!r}",
            field=field_name, value=raw, row_number=row_number,
        )
    return int(number)


def _normalize_keys(row: Mapping[Any, Any]) -> dict[str, Any]:
    """Lower-case and trim headers so 'Country ' and 'country' both match."""
    return {str(key).strip().lower(): value for key, value in row.items()}


def parse_record(row: Mapping[Any, Any], *, row_number: int = 0) -> RawRecord:
    """
    Convert one raw row into a RawRecord.

    Args:
        row: Mapping of column header to cell value; extra columns are ignored
        row_number: 1-based position of the row, used in error context

    Returns:
        Validated RawRecord

    Raises:
        MissingFieldError: A required column is absent, blank or NaN
        TypeMismatchError: A cell cannot be coerced or is out of range
    """
    normalized = _normalize_keys(row)

    for field_name in REQUIRED_COLUMNS:
        if _is_blank(normalized.get(field_name)):
            raise MissingFieldError(
                f"Missing required field '{REQUIRED_COLUMNS[field_name]}'",
                field=field_name, row_number=row_number,
            )

    country = str(normalized["country"]).strip()
    year = _coerce_int(normalized["year"], "year", row_number)
    if not MINYEAR <= year <= MAXYEAR:
        raise TypeMismatchError(
            f"year must be between {MINYEAR} and {MAXYEAR}, got {year}",
            field="year", value=year, row_number=row_number,
        )
    month = _coerce_int(normalized["month"], "month", row_number)
    if not 1 <= month <= 12:
        raise TypeMismatchError(
            f"month must be between 1 and 12, got {month}",
            field="month", value=month, row_number=row_number,
        )
    quantity = _coerce_number(normalized["quantity"], "quantity", row_number)
    value = _coerce_number(normalized["value"], "value", row_number)

    return RawRecord(country=country, year=year, month=month, quantity=quantity, value=value)


def _drop_reason(error: DataValidationError) -> DropReason:
    if isinstance(error, MissingFieldError):
        return DropReason.MISSING_FIELD
    return DropReason.TYPE_MISMATCH


def load_rows(rows: Iterable[Mapping[Any, Any]]) -> LoadResult:
    """
    Parse raw rows, keeping valid records and counting dropped ones.

    Args:
        rows: Iterable of row mappings (e.g. csv.DictReader or DataFrame records)

    Returns:
        LoadResult with records in input order and drop statistics
    """
    start_time = time.perf_counter()
    result = LoadResult()
    reasons: Counter[DropReason] = Counter()

    for row_number, row in enumerate(rows, start=1):
        result.rows_read += 1
        try:
            result.records.append(parse_record(row, row_number=row_number))
        except DataValidationError as e:
            reason = _drop_reason(e)
            reasons[reason] += 1
            result.dropped_rows.append(
                DroppedRow(row_number=row_number, reason=reason, field=e.field, detail=e.message)
            )

    result.dropped_by_reason = dict(reasons)
    result.load_duration_ms = (time.perf_counter() - start_time) * 1000

    if result.dropped_rows:
        summary = ", ".join(f"{reason.value}={count}" for reason, count in sorted(reasons.items()))
        logger.warning(f"Dropped {result.dropped_count} of {result.rows_read} rows ({summary})")

    return result


# =============================================================================
# CSV LOADER
# =============================================================================


class CsvDataLoader:
    """
    Load monthly import rows from a delimited file.

    The file is read once with pandas (numeric columns are typed on read),
    then every row goes through parse_record. A source that cannot be read
    raises DataLoadError; individual bad rows are only counted.

    Usage:
        loader = CsvDataLoader("data/imports.csv")
        result = loader.load()

        from importstory.features.aggregators import aggregate_series
        series = aggregate_series(result.records)
    """

    def __init__(self, source: str | Path, *, delimiter: str = ","):
        """
        Initialize loader.

        Args:
            source: Local path or URL of the delimited file
            delimiter: Field separator
        """
        self.source = source
        self.delimiter = delimiter

    @property
    def is_remote(self) -> bool:
        return str(self.source).lower().startswith(URL_PREFIXES)

    def _read_frame(self) -> pd.DataFrame:
        source = str(self.source)
        if not self.is_remote and not Path(source).is_file():
            raise DataLoadError(f"Data file not found: {source}", source=source)

        try:
            return pd.read_csv(source, sep=self.delimiter, skipinitialspace=True)
        except (OSError, ValueError) as e:
            raise DataLoadError(f"Could not read {source}: {e}", source=source) from e

    def load(self) -> LoadResult:
        """
        Read the file and parse every row.

        Returns:
            LoadResult with records and drop statistics

        Raises:
            DataLoadError: The file is missing, unreadable or lacks required columns
        """
        start_time = time.perf_counter()
        source = str(self.source)

        df = self._read_frame()

        headers = {str(c).strip().lower() for c in df.columns}
        missing = [label for key, label in REQUIRED_COLUMNS.items() if key not in headers]
        if missing:
            raise DataLoadError(
                f"{source} is missing required columns: {', '.join(missing)}",
                source=source,
                context={"missing_columns": missing},
            )

        result = load_rows(df.to_dict(orient="records"))
        result.source = source
        result.load_duration_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            f"Loaded {len(result.records)} records for {len(result.countries)} countries "
            f"from {source} in {result.load_duration_ms:.1f}ms"
        )
        return result


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def load_csv(source: str | Path, *, delimiter: str = ",") -> LoadResult:
    """
    Load import rows from a delimited file.

    Example:
        result = load_csv("data/imports.csv")
        print(f"Kept {len(result.records)} rows, dropped {result.dropped_count}")
    """
    return CsvDataLoader(source, delimiter=delimiter).load()
