from datetime import datetime

import pytest

from hokej.dates import format_timestamp, parse_date_range, parse_date_time


@pytest.mark.parametrize(
    "date_text, time_text, expected",
    [
        ("17.01.2026", "10:00", datetime(2026, 1, 17, 10, 0)),
        ("7.1.2026", "9:05", datetime(2026, 1, 7, 9, 5)),
        ("7. 1. 2026", "18:30", datetime(2026, 1, 7, 18, 30)),
        ("22.09.2024 17:00", "22.09.2024 17:00", datetime(2024, 9, 22, 17, 0)),
    ],
)
def test_parse_date_time(date_text, time_text, expected):
    assert parse_date_time(date_text, time_text) == expected


def test_time_range_uses_start():
    assert parse_date_time("1.2.2026", "10:00 - 19:00") == datetime(2026, 2, 1, 10, 0)


def test_missing_or_bad_time_defaults_to_midnight():
    assert parse_date_time("1.2.2026", None) == datetime(2026, 2, 1, 0, 0)
    assert parse_date_time("1.2.2026", "TBA") == datetime(2026, 2, 1, 0, 0)
    assert parse_date_time("1.2.2026", "25:61") == datetime(2026, 2, 1, 0, 0)


@pytest.mark.parametrize(
    "date_text",
    ["", None, "2026-01-17", "17/01/2026", "17.01.26", "neděle", "31.02.2026", "17.01.20261", "1.2.2026xyz"],
)
def test_malformed_dates_return_none(date_text):
    assert parse_date_time(date_text, "10:00") is None


def test_format_timestamp_zero_pads():
    assert format_timestamp(datetime(2026, 1, 7, 9, 5)) == "2026-01-07T09:05:00"
    assert format_timestamp(parse_date_time("7.1.2026", "9:05")) == "2026-01-07T09:05:00"


def test_date_range_yields_one_timestamp_per_fragment():
    stamps = parse_date_range("17.01.2026 - 18.01.2026", "10:00")

    assert stamps == [datetime(2026, 1, 17, 10, 0), datetime(2026, 1, 18, 10, 0)]


def test_date_range_keeps_text_order_and_shared_time():
    stamps = parse_date_range("3.2.2026 – 1.2.2026 - 2.2.2026", "8:15 - 12:00")

    assert [stamp.day for stamp in stamps] == [3, 1, 2]
    assert {(stamp.hour, stamp.minute) for stamp in stamps} == {(8, 15)}


def test_date_range_skips_unparsable_fragments():
    assert parse_date_range("17.01.2026 - ???", "10:00") == [datetime(2026, 1, 17, 10, 0)]


def test_single_date_and_empty_cells():
    assert parse_date_range("17.01.2026", None) == [datetime(2026, 1, 17)]
    assert parse_date_range("", "10:00") == []
    assert parse_date_range("odloženo", "10:00") == []
