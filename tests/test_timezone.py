from datetime import date, datetime, timezone

import pytest

from descomplicar.utils.timezone import (
    BRAZIL_TZ,
    days_difference_brazil,
    end_of_day_brazil,
    get_brazil_date,
    parse_date_string_as_brazil_day,
    start_of_day_brazil,
    to_brazil_date,
)


def test_brazil_date_before_utc_midnight_rollover():
    # 01:30 UTC on the 10th is 22:30 on the 9th in Brazil
    instant = datetime(2025, 6, 10, 1, 30, tzinfo=timezone.utc)
    assert get_brazil_date(instant) == date(2025, 6, 9)


def test_naive_datetime_is_utc():
    assert get_brazil_date(datetime(2025, 6, 10, 3, 0)) == date(2025, 6, 10)
    assert get_brazil_date(datetime(2025, 6, 10, 2, 59)) == date(2025, 6, 9)


def test_start_and_end_of_day():
    start = start_of_day_brazil(2025, 6, 10)
    end = end_of_day_brazil(2025, 6, 10)

    assert start.astimezone(timezone.utc) == datetime(2025, 6, 10, 3, 0, tzinfo=timezone.utc)
    assert end.tzinfo is BRAZIL_TZ
    assert end.date() == date(2025, 6, 10)


def test_parse_date_string():
    assert parse_date_string_as_brazil_day("2025-03-15") == date(2025, 3, 15)
    assert parse_date_string_as_brazil_day("2025-03-15T23:59:00Z") == date(2025, 3, 15)


def test_to_brazil_date():
    assert to_brazil_date(None) is None
    assert to_brazil_date("garbage") is None
    assert to_brazil_date(date(2025, 1, 1)) == date(2025, 1, 1)


def test_days_difference():
    assert days_difference_brazil("2025-06-08", "2025-06-10") == 2
    assert days_difference_brazil(date(2025, 6, 13), date(2025, 6, 10)) == -3


def test_days_difference_invalid():
    with pytest.raises(ValueError):
        days_difference_brazil("bad", "2025-06-10")
