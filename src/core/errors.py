"""Platter exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.types import CleaningReport


class PlatterError(Exception):
    """Base exception for all Platter failures."""


class PlatterConfigError(PlatterError):
    """Raised for invalid runtime configuration."""


class PlatterIngestError(PlatterError):
    """Raised for table snapshot loading failures."""


class PlatterTransformError(PlatterError):
    """Raised for normalization pipeline failures."""


class MalformedValueError(PlatterTransformError):
    """Raised by a rule when a value falls outside its expected shape."""

    def __init__(
        self,
        column: str,
        value: object,
        reason: str,
        record_index: int | None = None,
    ) -> None:
        super().__init__(f"Malformed value {value!r} in column '{column}': {reason}.")
        self.column = column
        self.value = value
        self.record_index = record_index


class RuleExecutionError(PlatterTransformError):
    """Raised when a rule fails and aborts the whole pipeline run.

    Attributes:
        rule_name: Name of the failing rule.
        record_index: Zero-based index of the offending input record.
        report: Report accumulated up to the failure, with ``failure`` set.
    """

    def __init__(
        self,
        rule_name: str,
        record_index: int | None,
        message: str,
        report: "CleaningReport",
    ) -> None:
        location = "record set" if record_index is None else f"record #{record_index}"
        super().__init__(f"Rule '{rule_name}' failed on {location}: {message}")
        self.rule_name = rule_name
        self.record_index = record_index
        self.report = report


class PlatterStoreError(PlatterError):
    """Raised for cleaned output persistence failures."""


class PlatterRecipeError(PlatterError):
    """Raised for invalid or unsupported cleaning recipes."""


class PlatterDependencyError(PlatterError):
    """Raised when an optional runtime dependency is missing."""
