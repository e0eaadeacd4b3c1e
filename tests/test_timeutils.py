"""
Tests for the date and duration helpers.
"""
from datetime import date, datetime

import pytest

from staffpay.core.exceptions import ValidationError
from staffpay.core.timeutils import month_bounds, month_label, parse_work_hours, start_of_day


class TestParseWorkHours:

    @pytest.mark.parametrize("text, minutes", [
        ("8h 30m", 510),
        ("9h 1m", 541),
        ("9h0m", 540),
        ("4h 29m", 269),
        ("8h", 480),
        ("0h 45m", 45),
    ])
    def test_durations(self, text, minutes):
        assert parse_work_hours(text) == minutes

    def test_empty_is_zero(self):
        assert parse_work_hours(None) == 0
        assert parse_work_hours("") == 0
        assert parse_work_hours("   ") == 0

    def test_not_a_duration(self):
        assert parse_work_hours("Running") is None
        assert parse_work_hours("-") is None


class TestDays:

    def test_start_of_day_truncates(self):
        assert start_of_day(datetime(2025, 6, 2, 17, 45, 12)) == datetime(2025, 6, 2)

    def test_start_of_day_accepts_date(self):
        assert start_of_day(date(2025, 6, 2)) == datetime(2025, 6, 2)

    def test_month_bounds(self):
        assert month_bounds(2, 2024) == (datetime(2024, 2, 1), datetime(2024, 2, 29))
        assert month_bounds(12, 2025) == (datetime(2025, 12, 1), datetime(2025, 12, 31))


class TestMonthLabel:

    def test_zero_based_index(self):
        assert month_label(0, 2025) == "January 2025"
        assert month_label(11, 2024) == "December 2024"

    def test_string_passes_through(self):
        assert month_label("March 2025") == "March 2025"

    def test_out_of_range_index(self):
        with pytest.raises(ValidationError):
            month_label(12, 2025)

    def test_index_needs_year(self):
        with pytest.raises(ValidationError):
            month_label(3)
