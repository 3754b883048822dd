from datetime import date

from flight_data.time_utils import (
    combine_date_time,
    is_same_utc_date,
    minutes_between,
    parse_iso,
    to_local,
    to_utc_iso,
    utc_day_window,
)


def test_utc_day_window_spans_one_day():
    assert utc_day_window(date(2024, 3, 1)) == ("2024-03-01T00:00:00Z", "2024-03-02T00:00:00Z")


def test_utc_day_window_crosses_month_end():
    assert utc_day_window(date(2024, 2, 29)) == ("2024-02-29T00:00:00Z", "2024-03-01T00:00:00Z")


def test_to_local_converts_into_airport_timezone():
    assert to_local("2024-03-01T10:05:00Z", "Europe/Paris") == "2024-03-01T11:05:00.000"
    # DST in New York
    assert to_local("2024-07-01T16:00:00Z", "America/New_York") == "2024-07-01T12:00:00.000"


def test_to_local_unknown_timezone_is_none():
    assert to_local("2024-03-01T10:05:00Z", "Mars/Olympus_Mons") is None
    assert to_local("2024-03-01T10:05:00Z", None) is None
    assert to_local("not a date", "Europe/Paris") is None


def test_parse_iso_treats_naive_as_utc():
    dt = parse_iso("2024-03-01T10:05:00")
    assert dt.utcoffset().total_seconds() == 0
    assert parse_iso("") is None
    assert parse_iso(None) is None


def test_to_utc_iso_normalizes_offsets():
    assert to_utc_iso(parse_iso("2024-03-01T11:05:00+01:00")) == "2024-03-01T10:05:00.000Z"


def test_combine_date_time():
    assert combine_date_time("2024-03-01", "09:00") == "2024-03-01T09:00:00.000Z"
    assert combine_date_time("2024-03-01", "10:00:30", utc=False) == "2024-03-01T10:00:30.000"
    assert combine_date_time("2024-03-01", None) is None
    assert combine_date_time("2024-13-01", "09:00") is None


def test_minutes_between_rounds():
    assert minutes_between("2024-03-01T17:30:00Z", "2024-03-01T20:50:29Z") == 200
    assert minutes_between("2024-03-01T17:30:00Z", "2024-03-01T17:00:00Z") == -30
    assert minutes_between(None, "2024-03-01T17:00:00Z") is None


def test_is_same_utc_date():
    assert is_same_utc_date("2024-03-01T23:30:00Z", date(2024, 3, 1))
    # 00:30 Paris is still the previous day in UTC
    assert is_same_utc_date("2024-03-02T00:30:00+01:00", date(2024, 3, 1))
    assert not is_same_utc_date("2024-03-02T00:30:00Z", date(2024, 3, 1))
    assert not is_same_utc_date(None, date(2024, 3, 1))
