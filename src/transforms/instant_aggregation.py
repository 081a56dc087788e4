"""Instant deduplication transform.

This module collapses ticks that share a timestamp into one row
carrying the mean price, so every instant appears exactly once.
"""

from __future__ import annotations

import datetime as dt
import math
from typing import Iterable

from core.types import InstantRow, NormalizedTick


def aggregate_by_instant(ticks: Iterable[NormalizedTick]) -> list[InstantRow]:
    """Group ticks by (timestamp, date) and average their prices.

    Args:
        ticks: Normalized ticks, possibly with repeated timestamps.

    Returns:
        One row per distinct timestamp, ordered by timestamp.
    """
    groups: dict[tuple[dt.datetime, dt.date], list[float]] = {}
    for tick in ticks:
        groups.setdefault((tick.timestamp, tick.date), []).append(tick.price)
    return [
        InstantRow(timestamp=timestamp, date=trade_date, price=_mean(prices))
        for (timestamp, trade_date), prices in sorted(groups.items())
    ]


def _mean(values: list[float]) -> float:
    return math.fsum(values) / len(values)
