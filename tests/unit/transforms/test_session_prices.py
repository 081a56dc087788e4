"""Unit tests for opening and closing price extraction."""

from __future__ import annotations

import datetime as dt

from core.types import InstantRow
from transforms.daily_summary import summarize_days
from transforms.session_prices import extract_closing_prices, extract_opening_prices


def _instant(day: int, hour: int, price: float) -> InstantRow:
    return InstantRow(
        timestamp=dt.datetime(2020, 1, day, hour),
        date=dt.date(2020, 1, day),
        price=price,
    )


def test_extract_session_prices_picks_first_and_last_instant() -> None:
    """Opening uses the earliest instant, closing the latest."""
    instants = [_instant(2, 12, 105.0), _instant(2, 9, 100.0), _instant(2, 16, 110.0)]
    summaries = summarize_days(instants)

    openings = extract_opening_prices(instants, summaries)
    closings = extract_closing_prices(instants, summaries)

    assert openings[dt.date(2020, 1, 2)].price == 100.0
    assert closings[dt.date(2020, 1, 2)].price == 110.0


def test_extract_session_prices_keys_every_summarized_date() -> None:
    """Each date in the summary should get an opening and a closing."""
    instants = [_instant(2, 9, 1.0), _instant(3, 9, 2.0), _instant(3, 15, 3.0)]
    summaries = summarize_days(instants)

    openings = extract_opening_prices(instants, summaries)
    closings = extract_closing_prices(instants, summaries)

    assert set(openings) == set(closings) == {dt.date(2020, 1, 2), dt.date(2020, 1, 3)}


def test_extract_session_prices_breaks_ties_with_lowest_price() -> None:
    """Rows sharing the extremal timestamp resolve to the lowest price."""
    instants = [_instant(2, 9, 101.0), _instant(2, 9, 99.0), _instant(2, 16, 7.0)]
    summaries = summarize_days(instants)

    openings = extract_opening_prices(instants, summaries)

    assert openings[dt.date(2020, 1, 2)].price == 99.0
