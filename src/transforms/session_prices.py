"""Opening and closing price extraction.

This module picks, for every trade date, the instant row sitting at the
session's first and last timestamp. Both derivations are keyed by date.
"""

from __future__ import annotations

import datetime as dt
from typing import Callable, Iterable

from core.logging_config import get_logger
from core.types import DailySummary, InstantRow, SessionPrice
from transforms.daily_summary import group_instants_by_date

_LOGGER = get_logger(__name__)


def extract_opening_prices(
    instants: Iterable[InstantRow],
    summaries: Iterable[DailySummary],
) -> dict[dt.date, SessionPrice]:
    """Return the price at each date's opening timestamp.

    Args:
        instants: Deduplicated instant rows.
        summaries: Daily summaries holding the opening timestamps.

    Returns:
        Mapping of date to opening session price.
    """
    return _extract_session_prices(
        instants, summaries, "opening", lambda summary: summary.opening_timestamp
    )


def extract_closing_prices(
    instants: Iterable[InstantRow],
    summaries: Iterable[DailySummary],
) -> dict[dt.date, SessionPrice]:
    """Return the price at each date's closing timestamp.

    Args:
        instants: Deduplicated instant rows.
        summaries: Daily summaries holding the closing timestamps.

    Returns:
        Mapping of date to closing session price.
    """
    return _extract_session_prices(
        instants, summaries, "closing", lambda summary: summary.closing_timestamp
    )


def _extract_session_prices(
    instants: Iterable[InstantRow],
    summaries: Iterable[DailySummary],
    session: str,
    timestamp_of: Callable[[DailySummary], dt.datetime],
) -> dict[dt.date, SessionPrice]:
    rows_by_date = group_instants_by_date(instants)
    session_prices: dict[dt.date, SessionPrice] = {}
    for summary in summaries:
        target = timestamp_of(summary)
        matches = [row for row in rows_by_date.get(summary.date, []) if row.timestamp == target]
        if not matches:
            continue
        session_prices[summary.date] = _pick_session_row(matches, session)
    return session_prices


def _pick_session_row(matches: list[InstantRow], session: str) -> SessionPrice:
    """Select one row among rows sharing the extremal timestamp.

    Ties resolve to the lowest price so repeated runs agree.
    """
    chosen = min(matches, key=lambda row: (row.timestamp, row.price))
    if len(matches) > 1:
        _LOGGER.warning(
            "session_price_tie",
            session=session,
            date=chosen.date.isoformat(),
            timestamp=chosen.timestamp.isoformat(),
            candidate_count=len(matches),
            chosen_price=chosen.price,
        )
    return SessionPrice(date=chosen.date, timestamp=chosen.timestamp, price=chosen.price)
