"""Unit tests for closing-price momentum transform."""

from __future__ import annotations

import datetime as dt

import pytest

from core.errors import TickStatsConfigError
from core.types import DailyJoined
from transforms.momentum import compute_momentum


def _joined(trade_date: dt.date, closing_price: float) -> DailyJoined:
    opening = dt.datetime.combine(trade_date, dt.time(9, 30))
    closing = dt.datetime.combine(trade_date, dt.time(16, 0))
    return DailyJoined(
        date=trade_date,
        price_low=closing_price,
        price_high=closing_price,
        price_avg=closing_price,
        opening_price=closing_price,
        closing_price=closing_price,
        opening_timestamp=opening,
        closing_timestamp=closing,
    )


def _business_days(count: int) -> list[dt.date]:
    days: list[dt.date] = []
    current = dt.date(2020, 1, 2)
    while len(days) < count:
        if current.weekday() < 5:
            days.append(current)
        current += dt.timedelta(days=1)
    return days


def test_compute_momentum_first_ten_rows_are_undefined() -> None:
    """Momentum needs ten prior rows before it is defined."""
    rows = [_joined(day, float(index)) for index, day in enumerate(_business_days(12))]

    points = compute_momentum(rows)

    assert [point.market_momentum for point in points[:10]] == [None] * 10
    assert points[10].market_momentum == rows[10].closing_price - rows[0].closing_price


def test_compute_momentum_counts_rows_not_calendar_days() -> None:
    """Gaps for weekends must not change which row is compared."""
    days = _business_days(11)
    closes = [100.0 + index * index for index in range(11)]
    rows = [_joined(day, close) for day, close in zip(days, closes)]

    points = compute_momentum(rows)

    assert (days[10] - days[0]).days > 10
    assert points[10].market_momentum == closes[10] - closes[0]


def test_compute_momentum_sorts_by_date() -> None:
    """Input order should not matter; output follows date order."""
    days = _business_days(3)
    rows = [_joined(days[2], 5.0), _joined(days[0], 1.0), _joined(days[1], 2.0)]

    points = compute_momentum(rows, lag_rows=1)

    assert [point.date for point in points] == days
    assert [point.market_momentum for point in points] == [None, 1.0, 3.0]


def test_compute_momentum_two_days_are_all_undefined() -> None:
    """With fewer rows than the lag, every point is undefined."""
    rows = [_joined(day, 1.0) for day in _business_days(2)]

    assert all(point.market_momentum is None for point in compute_momentum(rows))


def test_compute_momentum_rejects_non_positive_lag() -> None:
    """A zero lag would compare a day against itself."""
    with pytest.raises(TickStatsConfigError):
        compute_momentum([], lag_rows=0)
