"""
Module: schemas

Purpose: Pydantic models for all data structures in the import story.

All models use Pydantic v2 for validation with strict type hints.
"""

from datetime import MAXYEAR, MINYEAR, date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class Metric(str, Enum):
    """Measurement dimension shown by the charts."""

    QUANTITY = "quantity"
    VALUE = "value"

    @property
    def label(self) -> str:
        """Column-style label ("Quantity", "Value")."""
        return self.value.title()


class DropReason(str, Enum):
    """Why a raw row was excluded by the loader."""

    MISSING_FIELD = "missing_field"
    TYPE_MISMATCH = "type_mismatch"


# =============================================================================
# BASE MODELS
# =============================================================================


class BaseSchema(BaseModel):
    """Base model with common configuration."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


# =============================================================================
# RAW INPUT
# =============================================================================


class RawRecord(BaseSchema):
    """One typed input row: a country's imports for one month."""

    country: str = Field(min_length=1)
    year: int = Field(ge=MINYEAR, le=MAXYEAR)
    month: int = Field(ge=1, le=12)
    quantity: float = Field(allow_inf_nan=False)
    value: float = Field(allow_inf_nan=False)

    def __repr__(self) -> str:
        return (
            f"RawRecord(country={self.country!r}, period={self.year}-{self.month:02d}, "
            f"quantity={self.quantity}, value={self.value})"
        )

    @property
    def date(self) -> date:
        """First day of the record's month."""
        return date(self.year, self.month, 1)


# =============================================================================
# DERIVED SERIES
# =============================================================================


class MonthPoint(BaseSchema):
    """Aggregated observation for one (country, month)."""

    date: date
    quantity: float = Field(allow_inf_nan=False)
    value: float = Field(allow_inf_nan=False)

    def metric_value(self, metric: Metric) -> float:
        """Return the value of the given metric at this point."""
        return self.quantity if metric == Metric.QUANTITY else self.value


class CountrySeries(BaseSchema):
    """Monthly time series for one country, ascending by date."""

    country: str = Field(min_length=1)
    values: tuple[MonthPoint, ...]

    @field_validator("values")
    @classmethod
    def values_not_empty(cls, v: tuple[MonthPoint, ...]) -> tuple[MonthPoint, ...]:
        if not v:
            raise ValueError("series must contain at least one month")
        return v

    @model_validator(mode="after")
    def dates_strictly_increasing(self) -> "CountrySeries":
        for prev, curr in zip(self.values, self.values[1:]):
            if curr.date <= prev.date:
                raise ValueError(
                    f"dates for {self.country} must be strictly increasing "
                    f"({prev.date.isoformat()} then {curr.date.isoformat()})"
                )
        return self

    @property
    def first(self) -> MonthPoint:
        return self.values[0]

    @property
    def last(self) -> MonthPoint:
        return self.values[-1]

    @property
    def dates(self) -> list[date]:
        return [p.date for p in self.values]

    def __repr__(self) -> str:
        return (
            f"CountrySeries(country={self.country!r}, months={len(self.values)}, "
            f"span={self.first.date.isoformat()}..{self.last.date.isoformat()})"
        )


class ChangeRecord(BaseSchema):
    """First-vs-last change of one metric for one country."""

    country: str
    metric: Metric
    first_value: float = Field(allow_inf_nan=False)
    last_value: float = Field(allow_inf_nan=False)
    change_abs: float = Field(allow_inf_nan=False)
    change_pct: float = Field(allow_inf_nan=False)

    @property
    def is_riser(self) -> bool:
        return self.change_abs > 0

    @property
    def is_decliner(self) -> bool:
        return self.change_abs < 0
