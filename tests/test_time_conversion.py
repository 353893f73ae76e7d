"""
Tests for clock string / minute offset conversion.
"""

import pytest

from barberbooking.domain.timeconv import is_valid_time_of_day, to_minutes, to_time_of_day


class TestToMinutes:
    """Tests for to_minutes."""

    def test_midnight_and_noon(self):
        """12 AM is the start of the day, 12 PM is noon."""
        assert to_minutes("12:00 AM") == 0
        assert to_minutes("12:00 PM") == 720

    def test_afternoon_adds_twelve_hours(self):
        assert to_minutes("01:00 PM") == 780
        assert to_minutes("05:30 PM") == 1050

    def test_morning_hours(self):
        assert to_minutes("09:00 AM") == 540
        assert to_minutes("12:45 AM") == 45

    def test_hour_without_leading_zero(self):
        assert to_minutes("9:15 AM") == 555

    def test_lowercase_and_missing_space(self):
        assert to_minutes("10:00am") == 600
        assert to_minutes("2:30 pm") == 870

    @pytest.mark.parametrize("value", ["13:00 PM", "00:30 AM", "9:5 AM", "09:00", "noon", ""])
    def test_invalid_strings_raise(self, value):
        with pytest.raises(ValueError, match="HH:MM AM/PM"):
            to_minutes(value)


class TestToTimeOfDay:
    """Tests for to_time_of_day."""

    def test_midnight_and_noon(self):
        assert to_time_of_day(0) == "12:00 AM"
        assert to_time_of_day(720) == "12:00 PM"

    def test_zero_padding(self):
        assert to_time_of_day(545) == "09:05 AM"
        assert to_time_of_day(1050) == "05:30 PM"

    def test_last_minute_of_day(self):
        assert to_time_of_day(1439) == "11:59 PM"

    @pytest.mark.parametrize("offset", [-1, 1440, 2000])
    def test_out_of_range_raises(self, offset):
        with pytest.raises(ValueError):
            to_time_of_day(offset)


def test_round_trip_for_every_canonical_time():
    """Formatting a parsed canonical time yields the same string."""
    for hour in range(1, 13):
        for minute in range(60):
            for period in ("AM", "PM"):
                value = f"{hour:02d}:{minute:02d} {period}"
                assert to_time_of_day(to_minutes(value)) == value


def test_is_valid_time_of_day():
    assert is_valid_time_of_day("10:30 AM")
    assert not is_valid_time_of_day("10:30")
    assert not is_valid_time_of_day(None)


def test_validation_is_strict_but_parsing_tolerates_padding():
    """Stored records may carry padding; incoming values may not."""
    assert not is_valid_time_of_day("10:30 AM\n")
    assert not is_valid_time_of_day(" 10:30 AM")
    assert to_minutes(" 10:30 AM\n") == 630
