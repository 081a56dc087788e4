"""Pipeline run store and metadata catalog.

This module persists each pipeline run as an immutable version with a
manifest. It provides create, list, and table load operations for the SDK.
"""

from __future__ import annotations

import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from core.config import TickStatsConfig
from core.constants import (
    CATALOG_FILE_NAME,
    DATASETS_DIR_NAME,
    RECIPE_STEPS,
    SUPPORTED_TABLES,
    VERSIONS_DIR_NAME,
)
from core.errors import TickStatsStoreError
from core.logging_config import get_logger
from core.types import RunManifest, RunWriteRequest
from store.catalog_io import (
    build_version_id,
    manifest_from_dict,
    read_catalog_file,
    update_catalog,
    write_manifest_file,
)
from store.table_io import read_run_table, tables_by_name, write_run_tables

_LOGGER = get_logger(__name__)


class RunStore:
    """Immutable run store implementation.

    This class owns dataset directories, version manifests,
    and catalog updates for stored pipeline runs.
    """

    def __init__(self, config: TickStatsConfig) -> None:
        """Initialize run store from config.

        Args:
            config: Runtime configuration.
        """
        self._config = config
        self._datasets_root = config.data_root / DATASETS_DIR_NAME
        self._datasets_root.mkdir(parents=True, exist_ok=True)

    def create_run(self, request: RunWriteRequest) -> RunManifest:
        """Persist the derived tables of a pipeline run.

        Args:
            request: Run write request payload.

        Returns:
            Persisted run manifest.

        Raises:
            TickStatsStoreError: If persistence fails.
        """
        dataset_root = self._dataset_root(request.dataset_name)
        version_id = build_version_id(request.dataset_name, request.tables)
        version_dir = dataset_root / VERSIONS_DIR_NAME / version_id
        try:
            version_dir.mkdir(parents=True, exist_ok=False)
        except FileExistsError as error:
            raise TickStatsStoreError(
                f"Run version {version_id} already exists at {version_dir}. Retry the run."
            ) from error
        row_counts = {"raw_ticks": request.raw_tick_count}
        row_counts.update(
            {name: len(rows) for name, rows in tables_by_name(request.tables).items()}
        )
        manifest = RunManifest(
            dataset_name=request.dataset_name,
            version_id=version_id,
            created_at=datetime.now(timezone.utc),
            source_uri=request.source_uri,
            momentum_lag_rows=request.momentum_lag_rows,
            recipe_steps=RECIPE_STEPS,
            row_counts=row_counts,
        )
        try:
            write_run_tables(version_dir, request.tables)
            write_manifest_file(version_dir, manifest)
            update_catalog(dataset_root / CATALOG_FILE_NAME, manifest)
        except (OSError, TickStatsStoreError) as error:
            _discard_version_dir(version_dir, error)
            if isinstance(error, TickStatsStoreError):
                raise
            raise TickStatsStoreError(
                f"Failed to persist run {version_id} at {version_dir}: {error}. "
                "Check write permissions and available disk space."
            ) from error
        _LOGGER.info(
            "run_stored",
            dataset_name=request.dataset_name,
            version_id=version_id,
            row_counts=row_counts,
        )
        return manifest

    def list_versions(self, dataset_name: str) -> list[RunManifest]:
        """List manifests for a dataset sorted by creation time.

        Raises:
            TickStatsStoreError: If dataset catalog does not exist.
        """
        catalog_path = self._dataset_root(dataset_name) / CATALOG_FILE_NAME
        catalog = read_catalog_file(catalog_path)
        versions = [manifest_from_dict(item) for item in catalog["versions"]]
        return sorted(versions, key=lambda item: item.created_at)

    def load_table(
        self,
        dataset_name: str,
        table_name: str,
        version_id: str | None = None,
    ) -> tuple[RunManifest, list[Any]]:
        """Load one derived table of a stored run.

        Args:
            dataset_name: Dataset identifier.
            table_name: One of the stored table names.
            version_id: Optional run version; latest when omitted.

        Returns:
            Pair of manifest and typed table rows.

        Raises:
            TickStatsStoreError: If dataset, version, or table is unknown.
        """
        if table_name not in SUPPORTED_TABLES:
            raise TickStatsStoreError(
                f"Unknown table '{table_name}'. Use one of: {', '.join(SUPPORTED_TABLES)}."
            )
        manifest = self._resolve_manifest(dataset_name, version_id)
        version_dir = self._version_dir(dataset_name, manifest.version_id)
        return manifest, read_run_table(version_dir, table_name)

    def _dataset_root(self, dataset_name: str) -> Path:
        dataset_root = self._datasets_root / dataset_name
        (dataset_root / VERSIONS_DIR_NAME).mkdir(parents=True, exist_ok=True)
        return dataset_root

    def _resolve_manifest(self, dataset_name: str, version_id: str | None) -> RunManifest:
        """Resolve a target manifest, defaulting to the latest run.

        Raises:
            TickStatsStoreError: If catalog or target version is missing.
        """
        manifests = self.list_versions(dataset_name)
        if not manifests:
            raise TickStatsStoreError(
                f"No runs exist for dataset '{dataset_name}'. "
                "Run the pipeline before reading tables."
            )
        if version_id is None:
            return manifests[-1]
        for manifest in manifests:
            if manifest.version_id == version_id:
                return manifest
        raise TickStatsStoreError(
            f"Version '{version_id}' not found for dataset '{dataset_name}'. "
            "Use list_versions to discover valid version ids."
        )

    def _version_dir(self, dataset_name: str, version_id: str) -> Path:
        version_dir = self._dataset_root(dataset_name) / VERSIONS_DIR_NAME / version_id
        if not version_dir.exists():
            raise TickStatsStoreError(
                f"Missing run directory for {dataset_name}:{version_id} at {version_dir}. "
                "Rerun the pipeline to recreate it."
            )
        return version_dir


def _discard_version_dir(version_dir: Path, error: Exception) -> None:
    """Remove a half-written run so the catalog never points at it."""
    shutil.rmtree(version_dir, ignore_errors=True)
    _LOGGER.error("run_discarded", version_dir=str(version_dir), error=str(error))
