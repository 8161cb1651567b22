"""
Module: exceptions

Purpose: Domain-specific exception hierarchy for the import story pipeline.

All exceptions include context information and should be raised instead of returning None.
"""

from typing import Any


class ImportStoryError(Exception):
    """Base exception for all import story errors."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


class DataValidationError(ImportStoryError):
    """Raised when a raw row fails schema or type validation."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        row_number: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        if field is not None:
            ctx["field"] = field
        if value is not None:
            ctx["value"] = value
        if row_number is not None:
            ctx["row_number"] = row_number
        super().__init__(message, context=ctx)
        self.field = field
        self.value = value
        self.row_number = row_number


class MissingFieldError(DataValidationError):
    """Raised when a required column is absent or blank in a row."""


class TypeMismatchError(DataValidationError):
    """Raised when a column holds a value of the wrong type or range."""


class DataLoadError(ImportStoryError):
    """Raised when the input file cannot be fetched or read."""

    def __init__(
        self,
        message: str,
        *,
        source: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        ctx["source"] = source
        super().__init__(message, context=ctx)
        self.source = source


class InsufficientDataError(ImportStoryError):
    """Raised when there is insufficient data to build the story."""

    def __init__(
        self,
        message: str,
        *,
        required: int,
        actual: int,
        data_type: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        ctx["required"] = required
        ctx["actual"] = actual
        ctx["data_type"] = data_type
        super().__init__(message, context=ctx)
        self.required = required
        self.actual = actual
        self.data_type = data_type


class SceneNavigationError(ImportStoryError):
    """Raised when a scene index outside the story is requested."""

    def __init__(
        self,
        message: str,
        *,
        index: int,
        scene_count: int,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        ctx["index"] = index
        ctx["scene_count"] = scene_count
        super().__init__(message, context=ctx)
        self.index = index
        self.scene_count = scene_count


class UnknownCountryError(ImportStoryError):
    """Raised when a country not present in the data is selected."""

    def __init__(
        self,
        message: str,
        *,
        country: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        ctx["country"] = country
        super().__init__(message, context=ctx)
        self.country = country


class StoryRenderError(ImportStoryError):
    """Raised when story output generation fails."""

    def __init__(
        self,
        message: str,
        *,
        output_type: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        if output_type is not None:
            ctx["output_type"] = output_type
        super().__init__(message, context=ctx)
        self.output_type = output_type
