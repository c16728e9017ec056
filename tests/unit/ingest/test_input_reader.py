"""Unit tests for table snapshot reader."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from core.errors import PlatterIngestError
from ingest.input_reader import read_table_snapshot, read_table_snapshots
from tests.fixture_paths import fixture_path


def test_read_table_snapshots_reads_every_table() -> None:
    """Reader should key snapshots by file stem."""
    snapshots = read_table_snapshots(str(fixture_path("food_delivery")))

    assert set(snapshots) == {"restaurant", "users", "orders", "menu", "food"}
    assert len(snapshots["menu"].records) == 5


def test_read_csv_snapshot_maps_empty_fields_to_null() -> None:
    """Empty CSV fields should be read as nulls."""
    snapshot = read_table_snapshot(fixture_path("food_delivery/restaurant.csv"))

    assert snapshot.records[2]["address"] is None
    assert snapshot.records[0]["cuisine"] == "Beverages,Pizzas"


def test_read_jsonl_snapshot_keeps_control_characters_and_numbers() -> None:
    """JSONL values should keep their types and raw characters."""
    snapshot = read_table_snapshot(fixture_path("food_delivery/orders.jsonl"))

    assert snapshot.records[1]["currency"] == "INR\r"
    assert snapshot.records[0]["sales_qty"] == 100


def test_read_table_snapshots_raises_for_missing_directory(tmp_path: Path) -> None:
    """Reader should fail when source directory is missing."""
    missing_path = tmp_path / "does-not-exist"

    with pytest.raises(PlatterIngestError):
        read_table_snapshots(str(missing_path))

    assert missing_path.exists() is False


def test_read_table_snapshots_rejects_duplicate_table_files(tmp_path: Path) -> None:
    """Two files with the same stem should be rejected."""
    (tmp_path / "food.csv").write_text("f_id\nfd1\n", encoding="utf-8")
    (tmp_path / "food.jsonl").write_text(json.dumps({"f_id": "fd1"}) + "\n", encoding="utf-8")

    with pytest.raises(PlatterIngestError):
        read_table_snapshots(str(tmp_path))


def test_read_jsonl_snapshot_rejects_nested_values(tmp_path: Path) -> None:
    """Nested JSON values are not table cells."""
    table_path = tmp_path / "orders.jsonl"
    table_path.write_text(json.dumps({"r_id": {"id": 1}}) + "\n", encoding="utf-8")

    with pytest.raises(PlatterIngestError):
        read_table_snapshot(table_path)


def test_read_parquet_snapshot(tmp_path: Path) -> None:
    """Parquet snapshots should load through pyarrow."""
    pa = pytest.importorskip("pyarrow")
    pq = pytest.importorskip("pyarrow.parquet")
    table_path = tmp_path / "food.parquet"
    pq.write_table(pa.table({"f_id": ["fd1"], "item": ["gulab jamun"]}), table_path)

    snapshot = read_table_snapshot(table_path)

    assert snapshot.records == ({"f_id": "fd1", "item": "gulab jamun"},)
