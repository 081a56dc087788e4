"""Shared typed models.

This module defines immutable row models passed between pipeline stages,
plus the option and result models used by the SDK and store layers.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Mapping

from core.constants import DEFAULT_MOMENTUM_LAG_ROWS


@dataclass(frozen=True)
class RawTick:
    """One parsed source row before date/time normalization.

    Attributes:
        date_text: Trade date as written in the source, ``MM/DD/YYYY``.
        time_text: Time of day as written in the source.
        price: Observed price.
        volume: Observed volume.
    """

    date_text: str
    time_text: str
    price: float
    volume: int


@dataclass(frozen=True)
class NormalizedTick:
    """Tick with a calendar date and a combined timestamp.

    Attributes:
        date_text: Original date text.
        time_text: Original time text.
        date: Calendar date parsed from ``date_text``.
        timestamp: ``date`` combined with ``time_text``.
        price: Observed price.
        volume: Observed volume.
    """

    date_text: str
    time_text: str
    date: dt.date
    timestamp: dt.datetime
    price: float
    volume: int


@dataclass(frozen=True)
class InstantRow:
    """Mean price of every tick sharing one timestamp."""

    timestamp: dt.datetime
    date: dt.date
    price: float


@dataclass(frozen=True)
class DailySummary:
    """Per-date price range and session bounds.

    Attributes:
        date: Trade date.
        price_low: Lowest instant price of the day.
        price_high: Highest instant price of the day.
        price_avg: Mean instant price of the day.
        opening_timestamp: Earliest instant of the day.
        closing_timestamp: Latest instant of the day.
    """

    date: dt.date
    price_low: float
    price_high: float
    price_avg: float
    opening_timestamp: dt.datetime
    closing_timestamp: dt.datetime


@dataclass(frozen=True)
class SessionPrice:
    """Price observed at the opening or closing instant of a date."""

    date: dt.date
    timestamp: dt.datetime
    price: float


@dataclass(frozen=True)
class DailyJoined:
    """Daily summary joined with opening and closing prices."""

    date: dt.date
    price_low: float
    price_high: float
    price_avg: float
    opening_price: float
    closing_price: float
    opening_timestamp: dt.datetime
    closing_timestamp: dt.datetime


@dataclass(frozen=True)
class MomentumPoint:
    """Closing-price difference against a fixed number of prior rows.

    ``market_momentum`` is ``None`` until enough prior dates exist.
    """

    date: dt.date
    market_momentum: float | None


@dataclass(frozen=True)
class PipelineTables:
    """All derived tables of a single pipeline run."""

    instants: tuple[InstantRow, ...]
    daily_summary: tuple[DailySummary, ...]
    daily_joined: tuple[DailyJoined, ...]
    momentum: tuple[MomentumPoint, ...]


@dataclass(frozen=True)
class PipelineOptions:
    """Pipeline run options.

    Attributes:
        dataset_name: Dataset name under which the run is stored.
        source_uri: Input CSV file, directory, or S3 URI.
        output_path: Optional local CSV path for the momentum table.
        momentum_lag_rows: Row offset for the momentum stage.
    """

    dataset_name: str
    source_uri: str
    output_path: str | None = None
    momentum_lag_rows: int = DEFAULT_MOMENTUM_LAG_ROWS


@dataclass(frozen=True)
class RunManifest:
    """Immutable metadata for a stored pipeline run.

    Attributes:
        dataset_name: Logical dataset identifier.
        version_id: Immutable run id.
        created_at: UTC creation timestamp.
        source_uri: Input location used for the run.
        momentum_lag_rows: Row offset used by the momentum stage.
        recipe_steps: Ordered stage names.
        row_counts: Row count per stored table, plus ``raw_ticks``.
    """

    dataset_name: str
    version_id: str
    created_at: dt.datetime
    source_uri: str
    momentum_lag_rows: int
    recipe_steps: tuple[str, ...]
    row_counts: Mapping[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class RunWriteRequest:
    """Request payload for run persistence."""

    dataset_name: str
    source_uri: str
    momentum_lag_rows: int
    tables: PipelineTables
    raw_tick_count: int


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of one pipeline run.

    Attributes:
        manifest: Stored run manifest.
        tables: Derived tables held in memory.
        output_path: Momentum CSV path when one was requested.
    """

    manifest: RunManifest
    tables: PipelineTables
    output_path: str | None = None
