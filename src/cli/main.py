"""Tickstats CLI entry points.
This module exposes commands for running the pipeline and reading stored runs.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from cli.run_spec_command import add_run_spec_command, run_run_spec_command
from core.config import TickStatsConfig, validate_momentum_lag
from core.constants import SUPPORTED_TABLES, TABLE_MOMENTUM
from core.errors import TickStatsError
from core.run_spec_execution import format_version_row
from core.types import PipelineOptions
from store.csv_export import render_table_csv
from store.dataset_sdk import TickStatsClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="tickstats", description="Daily statistics from tick-level prices"
    )
    parser.add_argument("--data-root", help="Override TICKSTATS_DATA_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_run_command(subparsers)
    _add_versions_command(subparsers)
    _add_show_command(subparsers)
    add_run_spec_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the tickstats CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.data_root)
        return _dispatch(parser, client, args)
    except TickStatsError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1


def _dispatch(
    parser: argparse.ArgumentParser,
    client: TickStatsClient,
    args: argparse.Namespace,
) -> int:
    if args.command == "run":
        return _run_pipeline_command(client, args)
    if args.command == "versions":
        return _run_versions_command(client, args)
    if args.command == "show":
        return _run_show_command(client, args)
    if args.command == "run-spec":
        return run_run_spec_command(client, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(data_root: str | None) -> TickStatsClient:
    """Build SDK client with optional data-root override."""
    config = TickStatsConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    return TickStatsClient(config)


def _run_pipeline_command(client: TickStatsClient, args: argparse.Namespace) -> int:
    """Handle run command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    lag_rows = client.config.momentum_lag_rows
    if args.momentum_lag is not None:
        lag_rows = validate_momentum_lag(args.momentum_lag)
    options = PipelineOptions(
        dataset_name=args.dataset,
        source_uri=args.source,
        output_path=args.output,
        momentum_lag_rows=lag_rows,
    )
    result = client.run(options)
    print(result.manifest.version_id)
    return 0


def _run_versions_command(client: TickStatsClient, args: argparse.Namespace) -> int:
    """Handle versions command."""
    for manifest in client.dataset(args.dataset).list_versions():
        print(format_version_row(manifest))
    return 0


def _run_show_command(client: TickStatsClient, args: argparse.Namespace) -> int:
    """Handle show command."""
    _, rows = client.dataset(args.dataset).load_table(args.table, args.version_id)
    sys.stdout.write(render_table_csv(args.table, rows))
    return 0


def _add_run_command(subparsers: Any) -> None:
    """Register run subcommand."""
    parser = subparsers.add_parser("run", help="Run the pipeline over a tick CSV source")
    parser.add_argument("source", help="Source CSV file, directory, or s3://bucket/key")
    parser.add_argument("--dataset", required=True, help="Dataset name")
    parser.add_argument("--output", help="Optional CSV path for the momentum table")
    parser.add_argument(
        "--momentum-lag",
        type=int,
        help="Rows to look back for momentum (default: TICKSTATS_MOMENTUM_LAG or 10)",
    )


def _add_versions_command(subparsers: Any) -> None:
    """Register versions subcommand."""
    parser = subparsers.add_parser("versions", help="List stored runs")
    parser.add_argument("--dataset", required=True, help="Dataset name")


def _add_show_command(subparsers: Any) -> None:
    """Register show subcommand."""
    parser = subparsers.add_parser("show", help="Print a stored table as CSV")
    parser.add_argument("--dataset", required=True, help="Dataset name")
    parser.add_argument(
        "--table",
        default=TABLE_MOMENTUM,
        choices=SUPPORTED_TABLES,
        help="Table to print",
    )
    parser.add_argument("--version-id", help="Optional specific run id")
