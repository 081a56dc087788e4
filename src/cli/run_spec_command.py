"""The ``tickstats run-spec`` subcommand.

Reads a YAML file of ``run``, ``versions`` and ``show`` steps and prints
what each step produces: the stored version id, one line per stored run,
or the rows of a stored table as CSV.
"""

from __future__ import annotations

import argparse
from typing import Any

from store.dataset_sdk import TickStatsClient


def add_run_spec_command(subparsers: Any) -> None:
    """Register run-spec subcommand."""
    parser = subparsers.add_parser(
        "run-spec",
        help="Execute run/versions/show steps from a YAML file",
    )
    parser.add_argument("spec_file", help="YAML file listing tickstats steps")


def run_run_spec_command(client: TickStatsClient, args: argparse.Namespace) -> int:
    """Print the output lines of every step in file order."""
    for line in client.run_spec(args.spec_file):
        print(line)
    return 0
