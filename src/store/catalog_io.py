"""Catalog and manifest persistence helpers.

This module isolates JSON catalog IO and version id generation.
It keeps run store orchestration focused on business flow.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, cast

from core.constants import MANIFEST_FILE_NAME
from core.errors import TickStatsStoreError
from core.types import PipelineTables, RunManifest
from store.table_io import payload_from_row, tables_by_name


def build_version_id(dataset_name: str, tables: PipelineTables) -> str:
    """Build a version id from dataset name, creation time, and content.

    Args:
        dataset_name: Dataset identifier.
        tables: Derived tables of the run.

    Returns:
        Version id string.
    """
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    return f"{dataset_name}-{timestamp}-{content_digest(tables)}"


def content_digest(tables: PipelineTables) -> str:
    """Hash every table row so identical inputs share a digest."""
    hasher = hashlib.sha256()
    for table_name, rows in tables_by_name(tables).items():
        hasher.update(table_name.encode("utf-8"))
        for row in rows:
            hasher.update(json.dumps(payload_from_row(row), sort_keys=True).encode("utf-8"))
    return hasher.hexdigest()[:10]


def write_manifest_file(version_dir: Path, manifest: RunManifest) -> None:
    """Write per-version manifest file."""
    manifest_path = version_dir / MANIFEST_FILE_NAME
    manifest_path.write_text(
        json.dumps(_manifest_to_dict(manifest), indent=2) + "\n", encoding="utf-8"
    )


def update_catalog(catalog_path: Path, manifest: RunManifest) -> None:
    """Append manifest entry to dataset catalog.

    Args:
        catalog_path: Catalog JSON path.
        manifest: Manifest to append.
    """
    if catalog_path.exists():
        catalog = read_catalog_file(catalog_path)
    else:
        catalog = {"latest_version": None, "versions": []}
    versions = cast(list[dict[str, Any]], catalog["versions"])
    versions.append(_manifest_to_dict(manifest))
    catalog["latest_version"] = manifest.version_id
    catalog_path.write_text(json.dumps(catalog, indent=2) + "\n", encoding="utf-8")


def read_catalog_file(catalog_path: Path) -> dict[str, Any]:
    """Read and validate dataset catalog payload.

    Args:
        catalog_path: Catalog JSON path.

    Returns:
        Parsed catalog payload.

    Raises:
        TickStatsStoreError: If catalog is missing or invalid.
    """
    if not catalog_path.exists():
        raise TickStatsStoreError(
            f"Dataset catalog not found at {catalog_path}. Run the pipeline before listing versions."
        )
    try:
        payload = json.loads(catalog_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as error:
        raise TickStatsStoreError(
            f"Failed to parse dataset catalog at {catalog_path}: {error.msg}. "
            "Delete the dataset directory and rerun the pipeline."
        ) from error
    if not isinstance(payload, dict) or not isinstance(payload.get("versions"), list):
        raise TickStatsStoreError(
            f"Failed to parse dataset catalog at {catalog_path}: "
            "expected an object with a 'versions' list."
        )
    return payload


def manifest_from_dict(payload: dict[str, Any]) -> RunManifest:
    """Deserialize manifest payload from dictionary."""
    return RunManifest(
        dataset_name=str(payload["dataset_name"]),
        version_id=str(payload["version_id"]),
        created_at=datetime.fromisoformat(str(payload["created_at"])),
        source_uri=str(payload["source_uri"]),
        momentum_lag_rows=int(payload["momentum_lag_rows"]),
        recipe_steps=tuple(str(step) for step in payload["recipe_steps"]),
        row_counts={str(key): int(value) for key, value in payload["row_counts"].items()},
    )


def _manifest_to_dict(manifest: RunManifest) -> dict[str, Any]:
    manifest_dict = asdict(manifest)
    manifest_dict["created_at"] = manifest.created_at.isoformat()
    manifest_dict["recipe_steps"] = list(manifest.recipe_steps)
    manifest_dict["row_counts"] = dict(manifest.row_counts)
    return manifest_dict
