"""Python SDK for pipeline runs.

This module exposes high-level APIs for running the pipeline,
listing stored runs, and loading derived tables.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any

from core.config import TickStatsConfig
from core.constants import TABLE_MOMENTUM
from core.run_spec_execution import execute_run_spec_file
from core.types import PipelineOptions, PipelineResult, RunManifest
from ingest.pipeline import run_pipeline
from store.run_store import RunStore


class TickStatsClient:
    """Primary SDK entry point for pipeline workflows."""

    def __init__(self, config: TickStatsConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or TickStatsConfig.from_env()
        self._store = RunStore(self._config)

    @property
    def config(self) -> TickStatsConfig:
        """Return the runtime configuration used by this client."""
        return self._config

    def run(self, options: PipelineOptions) -> PipelineResult:
        """Run the pipeline over a tick source and store the result.

        Args:
            options: Pipeline options.

        Returns:
            Stored manifest and derived tables.

        Raises:
            TickStatsIngestError: If the source cannot be read or parsed.
            TickStatsTransformError: If a transform invariant is violated.
            TickStatsStoreError: If run persistence fails.
        """
        return run_pipeline(options, self._config)

    def dataset(self, dataset_name: str) -> "Dataset":
        """Get dataset handle by name."""
        return Dataset(dataset_name, self._store)

    def with_data_root(self, data_root: str) -> "TickStatsClient":
        """Clone the client with a different local data root.

        Args:
            data_root: New data root path.

        Returns:
            New SDK client instance.
        """
        resolved_root = Path(data_root).expanduser().resolve()
        return TickStatsClient(replace(self._config, data_root=resolved_root))

    def run_spec(self, spec_file: str) -> tuple[str, ...]:
        """Execute a YAML run-spec through the shared execution engine.

        Args:
            spec_file: Path to YAML run-spec file.

        Returns:
            Ordered command output lines.
        """
        return execute_run_spec_file(self, spec_file)


class Dataset:
    """SDK dataset handle for stored runs."""

    def __init__(self, dataset_name: str, store: RunStore) -> None:
        self._dataset_name = dataset_name
        self._store = store

    @property
    def name(self) -> str:
        """Return dataset identifier."""
        return self._dataset_name

    def list_versions(self) -> list[RunManifest]:
        """List all stored runs, oldest first."""
        return self._store.list_versions(self._dataset_name)

    def load_table(
        self,
        table_name: str = TABLE_MOMENTUM,
        version_id: str | None = None,
    ) -> tuple[RunManifest, list[Any]]:
        """Load a derived table for the latest or target run.

        Args:
            table_name: Stored table name.
            version_id: Optional specific run id.

        Returns:
            Pair of manifest and typed rows.
        """
        return self._store.load_table(self._dataset_name, table_name, version_id)
