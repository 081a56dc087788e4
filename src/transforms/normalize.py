"""Date and time normalization transform.

This module turns source date/time text into a calendar date and a
single timestamp. It is the first transform stage after ingest.
"""

from __future__ import annotations

import datetime as dt
from typing import Iterable

from core.constants import SOURCE_DATE_FORMAT, SOURCE_TIME_FORMATS
from core.errors import TickFormatError
from core.types import NormalizedTick, RawTick


def normalize_ticks(raw_ticks: Iterable[RawTick]) -> list[NormalizedTick]:
    """Derive calendar dates and timestamps for raw ticks.

    Args:
        raw_ticks: Parsed source rows.

    Returns:
        One normalized tick per input tick, in input order.

    Raises:
        TickFormatError: If a date or time field does not match its format.
    """
    normalized: list[NormalizedTick] = []
    for tick in raw_ticks:
        trade_date = parse_trade_date(tick.date_text)
        normalized.append(
            NormalizedTick(
                date_text=tick.date_text,
                time_text=tick.time_text,
                date=trade_date,
                timestamp=dt.datetime.combine(trade_date, parse_time_of_day(tick.time_text)),
                price=tick.price,
                volume=tick.volume,
            )
        )
    return normalized


def parse_trade_date(date_text: str) -> dt.date:
    """Parse ``MM/DD/YYYY`` date text.

    Raises:
        TickFormatError: If the text does not match the pattern.
    """
    try:
        return dt.datetime.strptime(date_text, SOURCE_DATE_FORMAT).date()
    except ValueError as error:
        raise TickFormatError(
            f"Invalid tick date '{date_text}': expected MM/DD/YYYY. "
            "Fix the date column of the source file."
        ) from error


def parse_time_of_day(time_text: str) -> dt.time:
    """Parse time text using the first supported format that matches.

    Raises:
        TickFormatError: If no supported format matches.
    """
    for time_format in SOURCE_TIME_FORMATS:
        try:
            return dt.datetime.strptime(time_text, time_format).time()
        except ValueError:
            continue
    raise TickFormatError(
        f"Invalid tick time '{time_text}': expected HH:MM:SS. "
        "Fix the time column of the source file."
    )
