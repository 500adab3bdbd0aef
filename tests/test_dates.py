"""Tests for disclosure date parsing and the recency window."""
from datetime import datetime, timezone

import pytest

from stockweather.utils.dates import (
    is_recent_disclosure_date, parse_disclosure_date, to_dart_date,
)


def test_parse_yyyymmdd():
    assert parse_disclosure_date("20240315") == datetime(2024, 3, 15)


@pytest.mark.parametrize("value", ["20240230", "20241301", "19891231", "99991231"])
def test_parse_rejects_invalid_yyyymmdd(value):
    assert parse_disclosure_date(value) is None


def test_parse_unix_seconds_and_millis():
    moment = datetime(2024, 3, 15, 9, 30)
    seconds = int(moment.timestamp())
    assert parse_disclosure_date(str(seconds)) == moment
    assert parse_disclosure_date(str(seconds * 1000)) == moment
    assert parse_disclosure_date(seconds) == moment


def test_parse_other_digit_lengths_rejected():
    assert parse_disclosure_date("123456") is None
    assert parse_disclosure_date("123456789012345") is None


def test_parse_iso_strings():
    assert parse_disclosure_date("2024-03-15") == datetime(2024, 3, 15)
    assert parse_disclosure_date("2024-03-15T09:30:00") == datetime(2024, 3, 15, 9, 30)


def test_parse_aware_iso_becomes_local_naive():
    parsed = parse_disclosure_date("2024-03-15T00:00:00Z")
    expected = datetime(2024, 3, 15, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert parsed == expected
    assert parsed.tzinfo is None


@pytest.mark.parametrize("value", [None, "", "   ", "not a date", "1985-01-01", True])
def test_parse_garbage_returns_none(value):
    assert parse_disclosure_date(value) is None


def test_recent_window_bounds():
    now = datetime(2024, 6, 1, 14, 0)
    assert is_recent_disclosure_date(datetime(2024, 5, 31), now)
    assert is_recent_disclosure_date(datetime(2019, 6, 1), now)
    assert not is_recent_disclosure_date(datetime(2019, 5, 31), now)
    assert is_recent_disclosure_date(datetime(2025, 6, 1), now)
    assert not is_recent_disclosure_date(datetime(2025, 6, 2), now)
    assert not is_recent_disclosure_date(None, now)


def test_recent_window_leap_day():
    now = datetime(2024, 2, 29)
    assert is_recent_disclosure_date(datetime(2019, 2, 28), now)
    assert not is_recent_disclosure_date(datetime(2019, 2, 27), now)


def test_to_dart_date():
    assert to_dart_date(datetime(2024, 1, 5, 23, 59)) == "20240105"


def test_recent_window_ignores_time_of_day():
    now = datetime(2024, 6, 1, 15, 45)
    assert is_recent_disclosure_date(datetime(2025, 6, 1, 10, 0), now)
    assert is_recent_disclosure_date(datetime(2019, 6, 1, 0, 0), now)
    assert not is_recent_disclosure_date(datetime(2025, 6, 2, 0, 0), now)
