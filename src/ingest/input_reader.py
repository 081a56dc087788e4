"""Tick source readers for ingestion.

This module loads comma-separated tick files from local paths or S3.
Rows are parsed into typed raw ticks; any malformed row aborts the run.
"""

from __future__ import annotations

import csv
import io
import math
from pathlib import Path
from typing import Any, Iterable

from core.config import TickStatsConfig
from core.constants import SOURCE_COLUMNS, SOURCE_DELIMITER, SUPPORTED_SOURCE_EXTENSIONS
from core.errors import TickParseError, TickStatsDependencyError, TickStatsIngestError
from core.s3_uri import S3Location, parse_s3_uri
from core.types import RawTick


def read_raw_ticks(source_uri: str, config: TickStatsConfig) -> list[RawTick]:
    """Load raw ticks from a local CSV file, directory, or S3 location.

    Args:
        source_uri: Local file, local directory, or ``s3://`` URI.
        config: Runtime configuration for S3 session defaults.

    Returns:
        Ticks in source order.

    Raises:
        TickStatsIngestError: If the source is missing or holds no rows.
        TickParseError: If a row has malformed fields.
    """
    if source_uri.startswith("s3://"):
        ticks = _read_s3_ticks(source_uri, config)
    else:
        ticks = _read_local_ticks(Path(source_uri).expanduser())
    if not ticks:
        raise TickStatsIngestError(
            f"No tick rows found in {source_uri}. "
            f"Provide CSV data with a header line {','.join(SOURCE_COLUMNS)}."
        )
    return ticks


def parse_tick_text(source_name: str, body: str) -> list[RawTick]:
    """Parse CSV text into raw ticks, skipping the header line.

    Args:
        source_name: File path or URI used in error messages.
        body: Full CSV text.

    Returns:
        Parsed ticks in row order.

    Raises:
        TickParseError: If a row is malformed.
    """
    reader = csv.reader(io.StringIO(body), delimiter=SOURCE_DELIMITER)
    ticks: list[RawTick] = []
    for line_number, row in enumerate(reader, 1):
        if line_number == 1 or not row:
            continue
        ticks.append(_parse_row(source_name, row, line_number))
    return ticks


def _parse_row(source_name: str, row: list[str], line_number: int) -> RawTick:
    if len(row) != len(SOURCE_COLUMNS):
        raise TickParseError(
            f"Malformed tick row at {source_name}:{line_number}: "
            f"expected {len(SOURCE_COLUMNS)} fields, got {len(row)}. "
            f"Columns must be {','.join(SOURCE_COLUMNS)}."
        )
    date_text, time_text, price_text, volume_text = (value.strip() for value in row)
    return RawTick(
        date_text=date_text,
        time_text=time_text,
        price=_parse_price(price_text, source_name, line_number),
        volume=_parse_number(int, volume_text, "volume", source_name, line_number),
    )


def _parse_price(raw_value: str, source_name: str, line_number: int) -> float:
    """Convert the price field, rejecting nan and infinities."""
    price = _parse_number(float, raw_value, "price", source_name, line_number)
    if not math.isfinite(price):
        raise TickParseError(
            f"Failed to parse price '{raw_value}' at {source_name}:{line_number}: "
            "expected a finite number. Fix the source row and rerun."
        )
    return price


def _parse_number(
    kind: type[Any],
    raw_value: str,
    field_name: str,
    source_name: str,
    line_number: int,
) -> Any:
    """Convert one numeric field, raising a located parse error."""
    try:
        return kind(raw_value)
    except ValueError as error:
        raise TickParseError(
            f"Failed to parse {field_name} '{raw_value}' at {source_name}:{line_number}: "
            f"expected {kind.__name__}. Fix the source row and rerun."
        ) from error


def _read_local_ticks(source_path: Path) -> list[RawTick]:
    """Read ticks from a local file or every CSV file under a directory.

    Raises:
        TickStatsIngestError: If path is missing or unreadable.
    """
    if not source_path.exists():
        raise TickStatsIngestError(
            f"Failed to read source at {source_path}: path does not exist. "
            "Provide an existing CSV file or directory."
        )
    if source_path.is_file():
        return _read_file_ticks(source_path)
    ticks: list[RawTick] = []
    for file_path in sorted(source_path.rglob("*")):
        if file_path.is_file() and _is_supported_name(file_path.name):
            ticks.extend(_read_file_ticks(file_path))
    return ticks


def _read_file_ticks(file_path: Path) -> list[RawTick]:
    try:
        body = file_path.read_text(encoding="utf-8")
    except OSError as error:
        raise TickStatsIngestError(
            f"Failed to read source at {file_path}: {error}. Check file permissions."
        ) from error
    except UnicodeDecodeError as error:
        raise _decode_error(str(file_path), error) from error
    return parse_tick_text(str(file_path), body)


def _read_s3_ticks(source_uri: str, config: TickStatsConfig) -> list[RawTick]:
    """Read ticks from S3 objects under a key or prefix."""
    location = parse_s3_uri(source_uri)
    s3_client = _create_s3_client(config)
    object_keys = _list_s3_keys(s3_client, location)
    return _download_s3_ticks(s3_client, location.bucket, object_keys)


def _create_s3_client(config: TickStatsConfig) -> Any:
    """Create a boto3 S3 client.

    Raises:
        TickStatsDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise TickStatsDependencyError(
            "S3 support requires boto3, but it is not installed. "
            "Install boto3 to read ticks from s3:// sources."
        ) from error
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")


def _list_s3_keys(s3_client: Any, location: S3Location) -> list[str]:
    """List CSV object keys under an S3 prefix in sorted order."""
    paginator = s3_client.get_paginator("list_objects_v2")
    pages = paginator.paginate(Bucket=location.bucket, Prefix=location.prefix)
    keys: list[str] = []
    for page in pages:
        for obj in page.get("Contents", []):
            key = obj["Key"]
            if _is_supported_name(key):
                keys.append(key)
    return sorted(keys)


def _download_s3_ticks(
    s3_client: Any,
    bucket: str,
    object_keys: Iterable[str],
) -> list[RawTick]:
    ticks: list[RawTick] = []
    for key in object_keys:
        source_name = f"s3://{bucket}/{key}"
        payload = s3_client.get_object(Bucket=bucket, Key=key)["Body"].read()
        try:
            body = payload.decode("utf-8")
        except UnicodeDecodeError as error:
            raise _decode_error(source_name, error) from error
        ticks.extend(parse_tick_text(source_name, body))
    return ticks


def _is_supported_name(name: str) -> bool:
    """Return whether a file name or object key has a CSV extension."""
    return Path(name).suffix.lower() in SUPPORTED_SOURCE_EXTENSIONS


def _decode_error(source_name: str, error: UnicodeDecodeError) -> TickStatsIngestError:
    return TickStatsIngestError(
        f"Failed to decode source at {source_name}: {error.reason} at byte {error.start}. "
        "Save the tick file as UTF-8 text."
    )
