"""Tests for the fallible URL parameter parsers."""

from datetime import date

import pytest

from url_filters.filters.params import parse_date, parse_days, split_list


class TestParseDays:
    @pytest.mark.parametrize("value,expected", [("7", 7), (" 30 ", 30), ("1", 1)])
    def test_positive_counts(self, value, expected):
        assert parse_days(value) == expected

    @pytest.mark.parametrize("value", [None, "", "0", "-3", "abc", "2.5", "7days"])
    def test_rejected_values(self, value):
        assert parse_days(value) is None

    @pytest.mark.parametrize("value", ["1_0", "\u0661\u0660", "\uff11\uff10"])
    def test_only_ascii_digits(self, value):
        assert parse_days(value) is None

    @pytest.mark.parametrize("value", ["1000000000", "9" * 40])
    def test_counts_beyond_timedelta_range(self, value):
        assert parse_days(value) is None

    def test_largest_accepted_count(self):
        assert parse_days("999999999") == 999999999


class TestParseDate:
    def test_valid_date(self):
        assert parse_date("2024-02-29") == date(2024, 2, 29)

    def test_surrounding_whitespace_is_ignored(self):
        assert parse_date(" 2024-01-05 ") == date(2024, 1, 5)

    @pytest.mark.parametrize("value", ["asdf", "2024-1-5", "20240105", "2024-01-05T10:00", "24-01-05", ""])
    def test_shape_mismatch(self, value):
        assert parse_date(value) is None

    @pytest.mark.parametrize("value", ["2024-13-40", "2023-02-29", "2024-00-10"])
    def test_calendar_invalid(self, value):
        assert parse_date(value) is None

    def test_non_ascii_digits_rejected(self):
        assert parse_date("٢٠٢٤-٠١-٠٥") is None

    def test_none(self):
        assert parse_date(None) is None


class TestSplitList:
    def test_splits_and_strips(self):
        assert split_list("a, b ,c") == ["a", "b", "c"]

    def test_drops_blanks_and_duplicates(self):
        assert split_list("a,,b,a, ") == ["a", "b"]

    @pytest.mark.parametrize("value", [None, "", ",,"])
    def test_empty(self, value):
        assert split_list(value) == []
