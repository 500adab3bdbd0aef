"""Date handling for disclosure source payloads.

The DART list API reports submission dates as ``YYYYMMDD`` strings, but other
feeds (and older cached payloads) carry ISO-8601 strings or unix timestamps.
"""
import re
from datetime import datetime
from typing import Any, Optional

MIN_YEAR = 1990
PAST_WINDOW_YEARS = 5
FUTURE_WINDOW_YEARS = 1

_YYYYMMDD = re.compile(r"^\d{8}$")
_DIGITS = re.compile(r"^\d+$")


def parse_disclosure_date(value: Any) -> Optional[datetime]:
    """Parse a submission date; returns None for anything unrecognised.

    Accepted forms, tried in order:
      - ``YYYYMMDD`` (calendar-checked)
      - 10 digits: unix seconds
      - 13 digits: unix milliseconds
      - ISO-8601 date or datetime (aware values become naive local time)
    """
    if value is None or isinstance(value, bool):
        return None

    text = str(value).strip()
    if not text:
        return None

    if _YYYYMMDD.match(text):
        year, month, day = int(text[:4]), int(text[4:6]), int(text[6:8])
        if year < MIN_YEAR or year > datetime.now().year + 10:
            return None
        try:
            return datetime(year, month, day)
        except ValueError:
            return None

    if _DIGITS.match(text):
        if len(text) == 10:
            return _from_timestamp(int(text))
        if len(text) == 13:
            return _from_timestamp(int(text) / 1000)
        return None

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    if parsed.year < MIN_YEAR:
        return None
    return parsed


def _from_timestamp(seconds: float) -> Optional[datetime]:
    try:
        parsed = datetime.fromtimestamp(seconds)
    except (OverflowError, OSError, ValueError):
        return None
    return parsed if parsed.year >= MIN_YEAR else None


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _shift_years(moment: datetime, years: int) -> datetime:
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return moment.replace(year=moment.year + years, day=28)


def is_recent_disclosure_date(
    value: Optional[datetime], now: Optional[datetime] = None
) -> bool:
    """True when the date lies within [now - 5y, now + 1y] (day granularity)."""
    if value is None:
        return False
    today = _start_of_day(now or datetime.now())
    earliest = _shift_years(today, -PAST_WINDOW_YEARS)
    latest = _shift_years(today, FUTURE_WINDOW_YEARS)
    return earliest <= _start_of_day(value) <= latest


def to_dart_date(moment: datetime) -> str:
    """Format a datetime as DART's ``YYYYMMDD``."""
    return moment.strftime("%Y%m%d")
