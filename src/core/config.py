"""Runtime configuration model for Platter.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import DEFAULT_OUTPUT_ROOT, DEFAULT_SAMPLE_LIMIT, DEFAULT_WORKERS
from core.errors import PlatterConfigError


@dataclass(frozen=True)
class PlatterConfig:
    """Validated runtime configuration.

    Attributes:
        output_root: Local root directory for cleaning run outputs.
        workers: Worker threads used by per-record rules.
        sample_limit: Maximum before/after samples kept per rule.
    """

    output_root: Path
    workers: int
    sample_limit: int

    @classmethod
    def from_env(cls) -> "PlatterConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            PlatterConfigError: If environment values are invalid.
        """
        output_root_value = os.getenv("PLATTER_OUTPUT_ROOT", str(DEFAULT_OUTPUT_ROOT))
        workers = _parse_int_setting(
            "PLATTER_WORKERS", os.getenv("PLATTER_WORKERS", str(DEFAULT_WORKERS)), 1
        )
        sample_limit = _parse_int_setting(
            "PLATTER_SAMPLE_LIMIT",
            os.getenv("PLATTER_SAMPLE_LIMIT", str(DEFAULT_SAMPLE_LIMIT)),
            0,
        )
        return cls(
            output_root=Path(output_root_value).expanduser().resolve(),
            workers=workers,
            sample_limit=sample_limit,
        )


def _parse_int_setting(variable_name: str, raw_value: str, minimum: int) -> int:
    """Parse a bounded integer environment value.

    Args:
        variable_name: Environment variable name for error context.
        raw_value: Raw string from environment.
        minimum: Smallest accepted value.

    Returns:
        Parsed integer.

    Raises:
        PlatterConfigError: If value is not an integer or is below minimum.
    """
    try:
        parsed_value = int(raw_value)
    except ValueError as error:
        raise PlatterConfigError(
            f"Invalid {variable_name} value: "
            f"expected integer, got '{raw_value}'. "
            f"Set {variable_name} to a numeric value."
        ) from error
    if parsed_value < minimum:
        raise PlatterConfigError(
            f"Invalid {variable_name} value: expected >= {minimum}, got {parsed_value}."
        )
    return parsed_value
