"""Derived table persistence helpers.

This module writes pipeline tables as JSONL files, which are the source
of truth for reloads, and as Parquet files for downstream analytics.
"""

from __future__ import annotations

import datetime as dt
import json
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any, Sequence

import pyarrow as pa
import pyarrow.parquet as pq

from core.constants import (
    TABLE_DAILY_JOINED,
    TABLE_DAILY_SUMMARY,
    TABLE_INSTANTS,
    TABLE_JSONL_SUFFIX,
    TABLE_MOMENTUM,
    TABLE_PARQUET_SUFFIX,
)
from core.errors import TickStatsStoreError
from core.types import DailyJoined, DailySummary, InstantRow, MomentumPoint, PipelineTables

TABLE_ROW_TYPES: dict[str, type[Any]] = {
    TABLE_INSTANTS: InstantRow,
    TABLE_DAILY_SUMMARY: DailySummary,
    TABLE_DAILY_JOINED: DailyJoined,
    TABLE_MOMENTUM: MomentumPoint,
}
_ARROW_FLOAT = pa.float64()
_ARROW_DATE = pa.date32()
_ARROW_TIMESTAMP = pa.timestamp("us")


def table_columns(table_name: str) -> tuple[str, ...]:
    """Return ordered column names for a stored table."""
    return tuple(item.name for item in fields(TABLE_ROW_TYPES[table_name]))


def tables_by_name(tables: PipelineTables) -> dict[str, Sequence[Any]]:
    """Map stored table names to their rows."""
    return {
        TABLE_INSTANTS: tables.instants,
        TABLE_DAILY_SUMMARY: tables.daily_summary,
        TABLE_DAILY_JOINED: tables.daily_joined,
        TABLE_MOMENTUM: tables.momentum,
    }


def write_run_tables(version_dir: Path, tables: PipelineTables) -> None:
    """Persist every derived table of a run.

    Args:
        version_dir: Run version directory.
        tables: Derived tables to persist.

    Raises:
        TickStatsStoreError: If any file cannot be written.
    """
    for table_name, rows in tables_by_name(tables).items():
        _write_jsonl_table(version_dir, table_name, rows)
        _write_parquet_table(version_dir, table_name, rows)


def read_run_table(version_dir: Path, table_name: str) -> list[Any]:
    """Load one stored table from its JSONL file.

    Args:
        version_dir: Run version directory.
        table_name: Stored table name.

    Returns:
        Typed rows in persisted order.

    Raises:
        TickStatsStoreError: If the file is missing or invalid.
    """
    table_path = version_dir / f"{table_name}{TABLE_JSONL_SUFFIX}"
    if not table_path.exists():
        raise TickStatsStoreError(
            f"Failed to load table at {version_dir}: missing {table_path.name}."
        )
    row_type = TABLE_ROW_TYPES[table_name]
    rows: list[Any] = []
    for line_number, line in enumerate(table_path.read_text(encoding="utf-8").splitlines(), 1):
        if not line.strip():
            continue
        payload = _parse_json_line(table_path, line, line_number)
        rows.append(row_from_payload(row_type, payload))
    return rows


def payload_from_row(row: Any) -> dict[str, object]:
    """Convert a row dataclass to a JSON-ready dictionary."""
    payload: dict[str, object] = {}
    for key, value in asdict(row).items():
        if isinstance(value, (dt.date, dt.datetime)):
            payload[key] = value.isoformat()
        else:
            payload[key] = value
    return payload


def row_from_payload(row_type: type[Any], payload: dict[str, Any]) -> Any:
    """Rebuild a typed row from its JSON dictionary."""
    values: dict[str, Any] = {}
    for item in fields(row_type):
        raw_value = payload[item.name]
        if item.name == "date":
            values[item.name] = dt.date.fromisoformat(raw_value)
        elif item.name.endswith("timestamp"):
            values[item.name] = dt.datetime.fromisoformat(raw_value)
        elif raw_value is None:
            values[item.name] = None
        else:
            values[item.name] = float(raw_value)
    return row_type(**values)


def _write_jsonl_table(version_dir: Path, table_name: str, rows: Sequence[Any]) -> None:
    table_path = version_dir / f"{table_name}{TABLE_JSONL_SUFFIX}"
    lines = [json.dumps(payload_from_row(row), sort_keys=True) for row in rows]
    try:
        table_path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
    except OSError as error:
        raise TickStatsStoreError(
            f"Failed to persist table at {table_path}: {error}. "
            "Check write permissions and available disk space."
        ) from error


def _write_parquet_table(version_dir: Path, table_name: str, rows: Sequence[Any]) -> None:
    table_path = version_dir / f"{table_name}{TABLE_PARQUET_SUFFIX}"
    schema = _arrow_schema(table_name)
    columns = {
        name: [getattr(row, name) for row in rows] for name in schema.names
    }
    try:
        pq.write_table(pa.table(columns, schema=schema), str(table_path))
    except (OSError, pa.ArrowException) as error:
        raise TickStatsStoreError(
            f"Failed to write Parquet table at {table_path}: {error}. "
            "Validate pyarrow installation and retry the run."
        ) from error


def _arrow_schema(table_name: str) -> pa.Schema:
    arrow_fields = []
    for column in table_columns(table_name):
        if column == "date":
            arrow_fields.append(pa.field(column, _ARROW_DATE))
        elif column.endswith("timestamp"):
            arrow_fields.append(pa.field(column, _ARROW_TIMESTAMP))
        else:
            arrow_fields.append(pa.field(column, _ARROW_FLOAT))
    return pa.schema(arrow_fields)


def _parse_json_line(table_path: Path, line: str, line_number: int) -> dict[str, Any]:
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as error:
        raise TickStatsStoreError(
            f"Failed to parse stored row at {table_path}:{line_number}: {error.msg}. "
            "Rerun the pipeline to rebuild the table."
        ) from error
    if not isinstance(payload, dict):
        raise TickStatsStoreError(
            f"Invalid stored row at {table_path}:{line_number}: expected JSON object."
        )
    return payload
