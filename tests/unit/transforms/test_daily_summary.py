"""Unit tests for daily summary transform."""

from __future__ import annotations

import datetime as dt

from core.types import InstantRow
from transforms.daily_summary import summarize_days


def _instant(day: int, hour: int, price: float) -> InstantRow:
    return InstantRow(
        timestamp=dt.datetime(2020, 1, day, hour),
        date=dt.date(2020, 1, day),
        price=price,
    )


def test_summarize_days_computes_range_and_bounds() -> None:
    """Summary should hold low, high, mean, and first/last instant per date."""
    instants = [_instant(2, 9, 100.0), _instant(2, 12, 120.0), _instant(2, 16, 110.0)]

    (summary,) = summarize_days(instants)

    assert (summary.price_low, summary.price_high, summary.price_avg) == (100.0, 120.0, 110.0)
    assert summary.opening_timestamp == dt.datetime(2020, 1, 2, 9)
    assert summary.closing_timestamp == dt.datetime(2020, 1, 2, 16)


def test_summarize_days_orders_by_date() -> None:
    """One row per date, ascending, whatever the input order."""
    instants = [_instant(6, 9, 1.0), _instant(2, 9, 2.0), _instant(3, 9, 3.0), _instant(2, 10, 4.0)]

    summaries = summarize_days(instants)

    assert [summary.date.day for summary in summaries] == [2, 3, 6]


def test_summarize_days_average_stays_within_range() -> None:
    """Floating point rounding must not push the mean past low or high."""
    instants = [_instant(2, hour, 0.1) for hour in range(9, 12)]

    (summary,) = summarize_days(instants)

    assert summary.price_low <= summary.price_avg <= summary.price_high


def test_summarize_days_single_instant_opens_and_closes_together() -> None:
    """A one-instant day opens and closes at the same timestamp."""
    (summary,) = summarize_days([_instant(2, 9, 5.0)])

    assert summary.opening_timestamp == summary.closing_timestamp
