# backend/tests/test_validators.py
from datetime import datetime

import pytest

from sentifi.utils.validators import parse_date_bound, validate_article_id, validate_date_range


class TestParseDateBound:

    def test_bare_date_as_start_is_midnight(self):
        assert parse_date_bound("2024-01-02") == datetime(2024, 1, 2)

    def test_bare_date_as_end_is_last_instant_of_day(self):
        assert parse_date_bound("2024-01-02", end=True) == datetime(2024, 1, 2, 23, 59, 59, 999999)

    def test_datetime_is_kept_and_converted_to_naive_utc(self):
        assert parse_date_bound("2024-01-02T12:00:00", end=True) == datetime(2024, 1, 2, 12, 0)
        assert parse_date_bound("2024-01-02T12:00:00+02:00") == datetime(2024, 1, 2, 10, 0)
        assert parse_date_bound("2024-01-02T12:00:00Z") == datetime(2024, 1, 2, 12, 0)

    def test_empty_is_open_bound(self):
        assert parse_date_bound(None) is None
        assert parse_date_bound("  ", end=True) is None

    def test_garbage_raises(self):
        with pytest.raises(ValueError):
            parse_date_bound("2024-02-30")
        with pytest.raises(ValueError):
            parse_date_bound("not a date")


def test_date_range_order():
    start, end = datetime(2024, 1, 1), datetime(2024, 1, 2)
    assert validate_date_range(start, end) == (start, end)
    with pytest.raises(ValueError):
        validate_date_range(end, start)


def test_article_id():
    assert validate_article_id(" 64f1a2b3c4d5e67890ab12cd ") == "64f1a2b3c4d5e67890ab12cd"
    with pytest.raises(ValueError):
        validate_article_id("abc")
