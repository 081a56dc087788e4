"""Closing-price momentum transform.

Momentum compares each day's close with the close a fixed number of
rows earlier in date order. The offset counts rows, not calendar days,
so weekends and holidays missing from the data do not widen the window.
"""

from __future__ import annotations

from typing import Iterable

from core.config import validate_momentum_lag
from core.constants import DEFAULT_MOMENTUM_LAG_ROWS
from core.types import DailyJoined, MomentumPoint


def compute_momentum(
    joined_rows: Iterable[DailyJoined],
    lag_rows: int = DEFAULT_MOMENTUM_LAG_ROWS,
) -> list[MomentumPoint]:
    """Compute lagged closing-price differences.

    Args:
        joined_rows: Joined daily rows in any order.
        lag_rows: Number of prior rows to look back.

    Returns:
        One point per date, ordered by date; the first ``lag_rows``
        points carry ``None``.

    Raises:
        TickStatsConfigError: If ``lag_rows`` is below 1.
    """
    validate_momentum_lag(lag_rows)
    ordered = sorted(joined_rows, key=lambda row: row.date)
    points: list[MomentumPoint] = []
    for index, row in enumerate(ordered):
        momentum = None
        if index >= lag_rows:
            momentum = row.closing_price - ordered[index - lag_rows].closing_price
        points.append(MomentumPoint(date=row.date, market_momentum=momentum))
    return points
