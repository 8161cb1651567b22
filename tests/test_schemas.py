"""
Tests for importstory/data/schemas.py
"""

from datetime import date

import pytest
from pydantic import ValidationError

from importstory.data.schemas import (
    ChangeRecord,
    CountrySeries,
    DropReason,
    Metric,
    MonthPoint,
    RawRecord,
)


# =============================================================================
# ENUM TESTS
# =============================================================================


class TestMetric:
    """Tests for the Metric enum."""

    def test_values(self) -> None:
        assert Metric("quantity") is Metric.QUANTITY
        assert Metric("value") is Metric.VALUE

    def test_label(self) -> None:
        assert Metric.QUANTITY.label == "Quantity"
        assert Metric.VALUE.label == "Value"

    def test_drop_reasons(self) -> None:
        assert {r.value for r in DropReason} == {"missing_field", "type_mismatch"}


# =============================================================================
# RAW RECORD TESTS
# =============================================================================


class TestRawRecord:
    """Tests for RawRecord validation."""

    def test_valid_record(self) -> None:
        record = RawRecord(country="USA", year=2024, month=2, quantity=150, value=1200)
        assert record.date == date(2024, 2, 1)
        assert record.quantity == 150.0

    def test_strips_country(self) -> None:
        record = RawRecord(country="  Peru ", year=2024, month=1, quantity=1, value=1)
        assert record.country == "Peru"

    @pytest.mark.parametrize("month", [0, 13])
    def test_month_out_of_range(self, month: int) -> None:
        with pytest.raises(ValidationError):
            RawRecord(country="USA", year=2024, month=month, quantity=1, value=1)

    def test_rejects_nan(self) -> None:
        with pytest.raises(ValidationError):
            RawRecord(country="USA", year=2024, month=1, quantity=float("nan"), value=1)

    def test_frozen(self) -> None:
        record = RawRecord(country="USA", year=2024, month=1, quantity=1, value=1)
        with pytest.raises(ValidationError):
            record.quantity = 2

    def test_extra_fields_forbidden(self) -> None:
        with pytest.raises(ValidationError):
            RawRecord(country="USA", year=2024, month=1, quantity=1, value=1, hs_code="61")


# =============================================================================
# SERIES TESTS
# =============================================================================


class TestCountrySeries:
    """Tests for CountrySeries invariants."""

    def test_first_and_last(self) -> None:
        series = CountrySeries(
            country="USA",
            values=(
                MonthPoint(date=date(2024, 1, 1), quantity=100, value=1000),
                MonthPoint(date=date(2024, 2, 1), quantity=150, value=1200),
            ),
        )
        assert series.first.quantity == 100
        assert series.last.metric_value(Metric.VALUE) == 1200
        assert series.dates == [date(2024, 1, 1), date(2024, 2, 1)]

    def test_empty_series_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CountrySeries(country="USA", values=())

    def test_dates_must_increase(self) -> None:
        with pytest.raises(ValidationError, match="strictly increasing"):
            CountrySeries(
                country="USA",
                values=(
                    MonthPoint(date=date(2024, 2, 1), quantity=1, value=1),
                    MonthPoint(date=date(2024, 1, 1), quantity=1, value=1),
                ),
            )

    def test_duplicate_dates_rejected(self) -> None:
        point = MonthPoint(date=date(2024, 1, 1), quantity=1, value=1)
        with pytest.raises(ValidationError):
            CountrySeries(country="USA", values=(point, point))


class TestChangeRecord:
    """Tests for ChangeRecord helpers."""

    def test_direction(self) -> None:
        up = ChangeRecord(
            country="USA", metric=Metric.QUANTITY,
            first_value=100, last_value=150, change_abs=50, change_pct=0.5,
        )
        flat = up.model_copy(update={"change_abs": 0.0, "change_pct": 0.0})
        assert up.is_riser and not up.is_decliner
        assert not flat.is_riser and not flat.is_decliner
