#!/usr/bin/env python3
"""Tests for calculation helper functions."""
import pytest
from datetime import date, datetime, timedelta

from fleet import (
    Status,
    calc_next_due_distance,
    calc_overdue_distance,
    check_date_status,
    check_distance_status,
    clean_distance,
    clean_interval,
    parse_date,
)

NOW = datetime(2025, 6, 1, 12, 0)


class TestCleanDistance:
    """Tests for clean_distance."""

    def test_valid_numbers(self):
        assert clean_distance(42000) == 42000
        assert clean_distance(12.5) == 12.5
        assert clean_distance(0) == 0

    def test_integral_float_becomes_int(self):
        result = clean_distance(42000.0)
        assert result == 42000
        assert isinstance(result, int)

    def test_numeric_string(self):
        assert clean_distance("42000") == 42000

    @pytest.mark.parametrize(
        "value", [None, -1, float("nan"), float("inf"), "abc", True, [1]]
    )
    def test_invalid_is_absent(self, value):
        """Invalid values are absent (None), never zero."""
        assert clean_distance(value) is None


class TestCleanInterval:
    """Tests for clean_interval."""

    def test_positive(self):
        assert clean_interval(8000) == 8000

    def test_zero_is_unset(self):
        assert clean_interval(0) is None

    def test_negative_is_unset(self):
        assert clean_interval(-5) is None


class TestParseDate:
    """Tests for parse_date."""

    def test_iso_string(self):
        assert parse_date("2025-01-10") == datetime(2025, 1, 10)

    def test_date_is_midnight(self):
        assert parse_date(date(2025, 1, 10)) == datetime(2025, 1, 10)

    def test_datetime_passes_through(self):
        assert parse_date(NOW) == NOW

    def test_aware_converted_to_utc(self):
        assert parse_date("2025-01-10T05:00:00+02:00") == datetime(2025, 1, 10, 3, 0)
        assert parse_date("2025-01-10T05:00:00Z") == datetime(2025, 1, 10, 5, 0)

    def test_different_offsets_compare_by_instant(self):
        """The same instant in two offsets parses equal; wall-clock order is ignored."""
        tokyo = parse_date("2025-01-10T09:00:00+09:00")
        london = parse_date("2025-01-10T00:00:00+00:00")
        assert tokyo == london
        assert parse_date("2025-01-10T08:00:00+09:00") < parse_date("2025-01-10T00:30:00Z")

    @pytest.mark.parametrize("value", [None, "", "garbage", 12345])
    def test_invalid_is_none(self, value):
        assert parse_date(value) is None


class TestCalcNextDueDistance:
    """Tests for calc_next_due_distance."""

    def test_last_plus_interval(self):
        assert calc_next_due_distance(34000, 8000) == 42000

    def test_missing_values(self):
        assert calc_next_due_distance(None, 8000) is None
        assert calc_next_due_distance(34000, None) is None


class TestCalcOverdueDistance:
    """Tests for calc_overdue_distance."""

    def test_past_due(self):
        assert calc_overdue_distance(42500, 42000) == 500

    def test_not_past_due(self):
        assert calc_overdue_distance(41000, 42000) == 0
        assert calc_overdue_distance(42000, 42000) == 0

    def test_missing_values(self):
        assert calc_overdue_distance(None, 42000) == 0
        assert calc_overdue_distance(42000, None) == 0


class TestCheckDistanceStatus:
    """Tests for check_distance_status."""

    def test_due(self):
        assert check_distance_status(42000, 42000, 800) == Status.DUE
        assert check_distance_status(43000, 42000, 800) == Status.DUE

    def test_approaching(self):
        assert check_distance_status(41600, 42000, 800) == Status.APPROACHING
        assert check_distance_status(41200, 42000, 800) == Status.APPROACHING

    def test_ok(self):
        assert check_distance_status(41199, 42000, 800) == Status.OK

    def test_no_buffer(self):
        assert check_distance_status(41999, 42000, 0) == Status.OK


class TestCheckDateStatus:
    """Tests for check_date_status."""

    def test_due_once_past(self):
        assert check_date_status(NOW, NOW - timedelta(days=1), 14) == Status.DUE

    def test_approaching_within_window(self):
        assert check_date_status(NOW, NOW + timedelta(days=1), 14) == Status.APPROACHING
        assert check_date_status(NOW, NOW + timedelta(days=14), 14) == Status.APPROACHING

    def test_ok_beyond_window(self):
        assert check_date_status(NOW, NOW + timedelta(days=15), 14) == Status.OK

    def test_due_date_equal_to_now(self):
        """Neither past nor strictly ahead: OK."""
        assert check_date_status(NOW, NOW, 14) == Status.OK
