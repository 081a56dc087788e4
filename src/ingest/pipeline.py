"""Pipeline orchestration for daily tick statistics.

This module chains ingest, normalization, aggregation, daily summary,
session price extraction, join, and momentum, then stores the run.
Any stage error aborts the whole run; nothing partial is persisted. The
momentum CSV is written before the run is stored and is removed again
when storing fails.
"""

from __future__ import annotations

from pathlib import Path

from core.config import TickStatsConfig
from core.constants import TABLE_MOMENTUM
from core.errors import TickStatsStoreError
from core.logging_config import get_logger
from core.types import (
    PipelineOptions,
    PipelineResult,
    PipelineTables,
    RawTick,
    RunWriteRequest,
)
from ingest.input_reader import read_raw_ticks
from store.csv_export import write_table_csv
from store.run_store import RunStore
from transforms.daily_join import join_daily_tables
from transforms.daily_summary import summarize_days
from transforms.instant_aggregation import aggregate_by_instant
from transforms.momentum import compute_momentum
from transforms.normalize import normalize_ticks
from transforms.session_prices import extract_closing_prices, extract_opening_prices

_LOGGER = get_logger(__name__)


class PipelineRunner:
    """Runner for one batch pipeline execution."""

    def __init__(self, options: PipelineOptions, config: TickStatsConfig) -> None:
        self._options = options
        self._config = config
        self._store = RunStore(config)

    def run(self) -> PipelineResult:
        """Execute every stage, store the run, and return its result."""
        raw_ticks = read_raw_ticks(self._options.source_uri, self._config)
        _LOGGER.info(
            "ticks_loaded",
            dataset_name=self._options.dataset_name,
            source_uri=self._options.source_uri,
            tick_count=len(raw_ticks),
        )
        tables = derive_tables(raw_ticks, self._options.momentum_lag_rows)
        output_path = self._write_output(tables)
        request = RunWriteRequest(
            dataset_name=self._options.dataset_name,
            source_uri=self._options.source_uri,
            momentum_lag_rows=self._options.momentum_lag_rows,
            tables=tables,
            raw_tick_count=len(raw_ticks),
        )
        try:
            manifest = self._store.create_run(request)
        except TickStatsStoreError:
            if output_path is not None:
                Path(output_path).unlink(missing_ok=True)
            raise
        _LOGGER.info(
            "pipeline_completed",
            dataset_name=self._options.dataset_name,
            version_id=manifest.version_id,
            day_count=len(tables.daily_joined),
            output_path=output_path,
        )
        return PipelineResult(manifest=manifest, tables=tables, output_path=output_path)

    def _write_output(self, tables: PipelineTables) -> str | None:
        if not self._options.output_path:
            return None
        target = write_table_csv(self._options.output_path, TABLE_MOMENTUM, tables.momentum)
        return str(target)


def run_pipeline(options: PipelineOptions, config: TickStatsConfig) -> PipelineResult:
    """Run the daily statistics pipeline and persist its tables.

    Args:
        options: Pipeline request options.
        config: Runtime configuration.

    Returns:
        Stored manifest and derived tables.

    Raises:
        TickStatsIngestError: If the source cannot be read or parsed.
        TickStatsTransformError: If a transform invariant is violated.
        TickStatsStoreError: If run persistence fails.
    """
    return PipelineRunner(options, config).run()


def derive_tables(raw_ticks: list[RawTick], momentum_lag_rows: int) -> PipelineTables:
    """Run the pure transform chain over parsed ticks.

    Args:
        raw_ticks: Parsed source rows.
        momentum_lag_rows: Row offset for the momentum stage.

    Returns:
        All derived tables.
    """
    normalized = normalize_ticks(raw_ticks)
    _log_stage("normalize", len(raw_ticks), len(normalized))
    instants = aggregate_by_instant(normalized)
    _log_stage("instant_aggregation", len(normalized), len(instants))
    summaries = summarize_days(instants)
    _log_stage("daily_summary", len(instants), len(summaries))
    openings = extract_opening_prices(instants, summaries)
    closings = extract_closing_prices(instants, summaries)
    joined = join_daily_tables(summaries, openings, closings)
    _log_stage("daily_join", len(summaries), len(joined))
    momentum = compute_momentum(joined, momentum_lag_rows)
    _log_stage("momentum", len(joined), len(momentum))
    return PipelineTables(
        instants=tuple(instants),
        daily_summary=tuple(summaries),
        daily_joined=tuple(joined),
        momentum=tuple(momentum),
    )


def _log_stage(stage: str, input_count: int, output_count: int) -> None:
    _LOGGER.debug(
        "stage_completed",
        stage=stage,
        input_count=input_count,
        output_count=output_count,
    )
