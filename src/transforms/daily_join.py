"""Daily table join transform.

This module inner-joins daily summaries with opening and closing prices
on the trade date. A date missing from either price table means an
earlier stage is broken, so the join refuses to drop it silently.
"""

from __future__ import annotations

import datetime as dt
from typing import Iterable, Mapping

from core.errors import JoinMismatchError
from core.logging_config import get_logger
from core.types import DailyJoined, DailySummary, SessionPrice

_LOGGER = get_logger(__name__)


def join_daily_tables(
    summaries: Iterable[DailySummary],
    openings: Mapping[dt.date, SessionPrice],
    closings: Mapping[dt.date, SessionPrice],
) -> list[DailyJoined]:
    """Join summary, opening, and closing rows into one row per date.

    Args:
        summaries: Daily summaries.
        openings: Opening prices keyed by date.
        closings: Closing prices keyed by date.

    Returns:
        Joined rows ordered by date ascending.

    Raises:
        JoinMismatchError: If a summary date lacks an opening or closing price.
    """
    summary_rows = sorted(summaries, key=lambda summary: summary.date)
    _check_join_keys(summary_rows, openings, closings)
    return [
        DailyJoined(
            date=summary.date,
            price_low=summary.price_low,
            price_high=summary.price_high,
            price_avg=summary.price_avg,
            opening_price=openings[summary.date].price,
            closing_price=closings[summary.date].price,
            opening_timestamp=summary.opening_timestamp,
            closing_timestamp=summary.closing_timestamp,
        )
        for summary in summary_rows
    ]


def _check_join_keys(
    summaries: list[DailySummary],
    openings: Mapping[dt.date, SessionPrice],
    closings: Mapping[dt.date, SessionPrice],
) -> None:
    missing_opening = [summary.date for summary in summaries if summary.date not in openings]
    missing_closing = [summary.date for summary in summaries if summary.date not in closings]
    if not missing_opening and not missing_closing:
        return
    _LOGGER.error(
        "join_mismatch",
        missing_opening=[item.isoformat() for item in missing_opening],
        missing_closing=[item.isoformat() for item in missing_closing],
    )
    raise JoinMismatchError(
        "Daily join found dates without session prices: "
        f"missing opening {_format_dates(missing_opening)}, "
        f"missing closing {_format_dates(missing_closing)}. "
        "Opening and closing tables must cover every summarized date."
    )


def _format_dates(dates: list[dt.date]) -> str:
    return "[" + ", ".join(item.isoformat() for item in dates) + "]"
