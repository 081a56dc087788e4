"""Shared run-spec execution engine for CLI and SDK workflows.

This module maps validated run-spec steps to client operations so different
entry points can execute one declarative pipeline path without drift.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from core.errors import TickStatsRunSpecError
from core.run_spec import RunSpec, RunSpecStep, load_run_spec
from core.run_spec_fields import (
    momentum_lag_arg,
    optional_text,
    required_text,
    table_name_arg,
)
from core.types import PipelineOptions, PipelineResult, RunManifest
from store.csv_export import render_table_csv


class RunSpecClient(Protocol):
    """Client API contract required by run-spec execution."""

    @property
    def config(self) -> Any: ...

    def with_data_root(self, data_root: str) -> Any: ...

    def run(self, options: PipelineOptions) -> PipelineResult: ...

    def dataset(self, dataset_name: str) -> Any: ...


@dataclass(frozen=True)
class RunSpecExecutionContext:
    """In-memory context used to execute run-spec steps."""

    client: RunSpecClient
    default_dataset_name: str | None


def execute_run_spec_file(client: RunSpecClient, spec_file: str) -> tuple[str, ...]:
    """Load and execute a run-spec file, returning printable output lines."""
    spec = load_run_spec(spec_file)
    return execute_run_spec(client, spec)


def execute_run_spec(client: RunSpecClient, spec: RunSpec) -> tuple[str, ...]:
    """Execute a parsed run-spec object and return output lines."""
    execution_client = (
        client.with_data_root(spec.defaults.data_root) if spec.defaults.data_root else client
    )
    context = RunSpecExecutionContext(
        client=execution_client,
        default_dataset_name=spec.defaults.dataset_name,
    )
    output_lines: list[str] = []
    for step in spec.steps:
        output_lines.extend(_execute_step(context, step))
    return tuple(output_lines)


def format_version_row(manifest: RunManifest) -> str:
    """Render one stored run as a tab-separated line."""
    day_count = manifest.row_counts.get("daily_joined", 0)
    return (
        f"{manifest.version_id}\t{day_count}\t"
        f"{manifest.created_at.isoformat()}\t{manifest.source_uri}"
    )


def _execute_step(context: RunSpecExecutionContext, step: RunSpecStep) -> tuple[str, ...]:
    if step.command == "run":
        return (_execute_run_step(context, step),)
    if step.command == "versions":
        return _execute_versions_step(context, step)
    if step.command == "show":
        return _execute_show_step(context, step)
    raise TickStatsRunSpecError(f"Unsupported run-spec command '{step.command}'.")


def _execute_run_step(context: RunSpecExecutionContext, step: RunSpecStep) -> str:
    options = PipelineOptions(
        dataset_name=_resolve_dataset_name(context, step),
        source_uri=required_text(step.args, "source"),
        output_path=optional_text(step.args, "output"),
        momentum_lag_rows=momentum_lag_arg(step.args, context.client.config.momentum_lag_rows),
    )
    return context.client.run(options).manifest.version_id


def _execute_versions_step(
    context: RunSpecExecutionContext,
    step: RunSpecStep,
) -> tuple[str, ...]:
    versions = context.client.dataset(_resolve_dataset_name(context, step)).list_versions()
    return tuple(format_version_row(manifest) for manifest in versions)


def _execute_show_step(context: RunSpecExecutionContext, step: RunSpecStep) -> tuple[str, ...]:
    table_name = table_name_arg(step.args)
    dataset = context.client.dataset(_resolve_dataset_name(context, step))
    _, rows = dataset.load_table(table_name, optional_text(step.args, "version_id"))
    return tuple(render_table_csv(table_name, rows).splitlines())


def _resolve_dataset_name(context: RunSpecExecutionContext, step: RunSpecStep) -> str:
    dataset_name = optional_text(step.args, "dataset")
    if dataset_name:
        return dataset_name
    if context.default_dataset_name:
        return context.default_dataset_name
    raise TickStatsRunSpecError(
        f"Run-spec command '{step.command}' requires dataset. "
        "Set 'dataset' on the step or in top-level defaults."
    )
