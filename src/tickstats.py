"""Public SDK surface for tickstats.

This module provides a stable import path for library users.
It re-exports the client, typed models, and pure transform stages.
"""

from __future__ import annotations

from core.config import TickStatsConfig
from core.errors import (
    JoinMismatchError,
    TickFormatError,
    TickParseError,
    TickStatsError,
)
from core.types import (
    DailyJoined,
    DailySummary,
    InstantRow,
    MomentumPoint,
    PipelineOptions,
    PipelineResult,
    RawTick,
)
from ingest.pipeline import derive_tables
from store.dataset_sdk import Dataset, TickStatsClient

__all__ = [
    "DailyJoined",
    "DailySummary",
    "Dataset",
    "InstantRow",
    "JoinMismatchError",
    "MomentumPoint",
    "PipelineOptions",
    "PipelineResult",
    "RawTick",
    "TickFormatError",
    "TickParseError",
    "TickStatsClient",
    "TickStatsConfig",
    "TickStatsError",
    "derive_tables",
]
