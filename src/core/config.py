"""Runtime configuration model for tickstats.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import DEFAULT_DATA_ROOT, DEFAULT_MOMENTUM_LAG_ROWS
from core.errors import TickStatsConfigError


@dataclass(frozen=True)
class TickStatsConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for stored pipeline runs.
        momentum_lag_rows: Row offset used by the momentum stage.
        s3_region: Optional default AWS region for S3 reads.
        s3_profile: Optional AWS profile for boto3 session initialization.
    """

    data_root: Path
    momentum_lag_rows: int
    s3_region: str | None
    s3_profile: str | None

    @classmethod
    def from_env(cls) -> "TickStatsConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            TickStatsConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("TICKSTATS_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        lag_value = os.getenv("TICKSTATS_MOMENTUM_LAG", str(DEFAULT_MOMENTUM_LAG_ROWS))
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            momentum_lag_rows=parse_momentum_lag(lag_value),
            s3_region=os.getenv("TICKSTATS_S3_REGION"),
            s3_profile=os.getenv("TICKSTATS_S3_PROFILE"),
        )


def parse_momentum_lag(raw_value: str) -> int:
    """Parse and validate the momentum lag row count.

    Args:
        raw_value: Raw string from environment or CLI.

    Returns:
        Positive integer lag.

    Raises:
        TickStatsConfigError: If value is not a positive integer.
    """
    try:
        lag_rows = int(raw_value)
    except ValueError as error:
        raise TickStatsConfigError(
            "Invalid TICKSTATS_MOMENTUM_LAG value: "
            f"expected integer, got '{raw_value}'. "
            "Set TICKSTATS_MOMENTUM_LAG to a positive number of rows."
        ) from error
    return validate_momentum_lag(lag_rows)


def validate_momentum_lag(lag_rows: int) -> int:
    """Reject lag values that would compare a day with itself or the future."""
    if lag_rows < 1:
        raise TickStatsConfigError(
            f"Momentum lag must be at least 1 row, got {lag_rows}. "
            "Use the default of 10 rows or another positive value."
        )
    return lag_rows
