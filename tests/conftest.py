"""Pytest configuration for repository test runs."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from core.config import PlatterConfig


@pytest.fixture
def platter_config(tmp_path: Path) -> PlatterConfig:
    """Return a sequential config writing runs under a temporary root."""
    return replace(PlatterConfig.from_env(), output_root=tmp_path / "runs", workers=1)
