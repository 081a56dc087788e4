"""Daily summary transform.

This module reduces instant rows to one row per trade date with the
price range, average, and the first and last instant of the session.
"""

from __future__ import annotations

import datetime as dt
import math
from typing import Iterable

from core.types import DailySummary, InstantRow


def summarize_days(instants: Iterable[InstantRow]) -> list[DailySummary]:
    """Compute per-date low, high, average, and session bounds.

    Args:
        instants: Deduplicated instant rows.

    Returns:
        Summaries ordered by date ascending.
    """
    rows_by_date = group_instants_by_date(instants)
    summaries: list[DailySummary] = []
    for trade_date in sorted(rows_by_date):
        rows = rows_by_date[trade_date]
        prices = [row.price for row in rows]
        timestamps = [row.timestamp for row in rows]
        price_low, price_high = min(prices), max(prices)
        summaries.append(
            DailySummary(
                date=trade_date,
                price_low=price_low,
                price_high=price_high,
                price_avg=_bounded_mean(prices, price_low, price_high),
                opening_timestamp=min(timestamps),
                closing_timestamp=max(timestamps),
            )
        )
    return summaries


def group_instants_by_date(instants: Iterable[InstantRow]) -> dict[dt.date, list[InstantRow]]:
    """Bucket instant rows by trade date, preserving input order per date."""
    rows_by_date: dict[dt.date, list[InstantRow]] = {}
    for row in instants:
        rows_by_date.setdefault(row.date, []).append(row)
    return rows_by_date


def _bounded_mean(prices: list[float], price_low: float, price_high: float) -> float:
    # Rounding in the sum must not push the mean outside [low, high].
    mean = math.fsum(prices) / len(prices)
    return min(max(mean, price_low), price_high)
