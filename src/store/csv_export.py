"""CSV rendering for derived tables.

This module formats stored or in-memory table rows as CSV for the
momentum output file and the ``show`` command.
"""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Any, Sequence

from core.errors import TickStatsStoreError
from store.table_io import payload_from_row, table_columns


def render_table_csv(table_name: str, rows: Sequence[Any]) -> str:
    """Render rows as CSV text with a header line.

    Missing momentum values are written as empty cells.
    """
    columns = table_columns(table_name)
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(columns)
    for row in rows:
        payload = payload_from_row(row)
        writer.writerow(["" if payload[column] is None else payload[column] for column in columns])
    return buffer.getvalue()


def write_table_csv(output_path: str, table_name: str, rows: Sequence[Any]) -> Path:
    """Write rows to a local CSV file, creating parent directories.

    Raises:
        TickStatsStoreError: If the file cannot be written.
    """
    target = Path(output_path).expanduser()
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(render_table_csv(table_name, rows), encoding="utf-8")
    except OSError as error:
        raise TickStatsStoreError(
            f"Failed to write {table_name} CSV at {target}: {error}. "
            "Check the output path and write permissions."
        ) from error
    return target
