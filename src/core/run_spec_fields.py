"""Step argument readers for tickstats run-specs.

A YAML step such as ``{command: run, source: ticks.csv, momentum_lag: 5}``
arrives as a plain mapping. These readers pull the source, dataset, table
and lag values out of it and fail with ``TickStatsRunSpecError`` naming the
offending key.
"""

from __future__ import annotations

from typing import Mapping

from core.config import validate_momentum_lag
from core.constants import SUPPORTED_TABLES, TABLE_MOMENTUM
from core.errors import TickStatsConfigError, TickStatsRunSpecError


def required_text(step_args: Mapping[str, object], key: str) -> str:
    """Read a mandatory text argument, e.g. the ``source`` of a run step."""
    value = optional_text(step_args, key)
    if value is None:
        raise TickStatsRunSpecError(f"Run-spec step is missing required field '{key}'.")
    return value


def optional_text(step_args: Mapping[str, object], key: str) -> str | None:
    """Read a text argument; blank strings count as absent."""
    value = step_args.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None
    raise TickStatsRunSpecError(f"Run-spec field '{key}' must be a string when provided.")


def table_name_arg(step_args: Mapping[str, object]) -> str:
    """Read the ``table`` of a show step, defaulting to the momentum table."""
    table_name = optional_text(step_args, "table") or TABLE_MOMENTUM
    if table_name not in SUPPORTED_TABLES:
        raise TickStatsRunSpecError(
            f"Run-spec field 'table' has unknown value '{table_name}'. "
            f"Use one of: {', '.join(SUPPORTED_TABLES)}."
        )
    return table_name


def momentum_lag_arg(step_args: Mapping[str, object], default_lag: int) -> int:
    """Read ``momentum_lag`` as a positive row count, falling back to config."""
    value = step_args.get("momentum_lag")
    if value is None:
        return default_lag
    if isinstance(value, bool) or not isinstance(value, int):
        raise TickStatsRunSpecError("Run-spec field 'momentum_lag' must be an integer.")
    try:
        return validate_momentum_lag(value)
    except TickStatsConfigError as error:
        raise TickStatsRunSpecError(f"Run-spec field 'momentum_lag' is invalid: {error}") from error
