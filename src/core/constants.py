"""Core constants used across tickstats modules.

This module centralizes file names, formats, and pipeline defaults.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".tickstats")
DATASETS_DIR_NAME = "datasets"
VERSIONS_DIR_NAME = "versions"
CATALOG_FILE_NAME = "catalog.json"
MANIFEST_FILE_NAME = "manifest.json"
TABLE_JSONL_SUFFIX = ".jsonl"
TABLE_PARQUET_SUFFIX = ".parquet"
SUPPORTED_SOURCE_EXTENSIONS = (".csv",)
SOURCE_COLUMNS = ("date", "time", "price", "volume")
SOURCE_DELIMITER = ","
SOURCE_DATE_FORMAT = "%m/%d/%Y"
SOURCE_TIME_FORMATS = ("%H:%M:%S", "%H:%M:%S.%f", "%H:%M")
DEFAULT_MOMENTUM_LAG_ROWS = 10
TABLE_INSTANTS = "instants"
TABLE_DAILY_SUMMARY = "daily_summary"
TABLE_DAILY_JOINED = "daily_joined"
TABLE_MOMENTUM = "momentum"
SUPPORTED_TABLES = (
    TABLE_INSTANTS,
    TABLE_DAILY_SUMMARY,
    TABLE_DAILY_JOINED,
    TABLE_MOMENTUM,
)
RECIPE_STEPS = (
    "ingest",
    "normalize",
    "instant_aggregation",
    "daily_summary",
    "session_prices",
    "daily_join",
    "momentum",
)
