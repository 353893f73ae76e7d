"""
Tests for the single-booking overlap guard.
"""

import pytest

from barberbooking.domain.booking_guard import ensure_no_conflict, find_conflict
from barberbooking.domain.exceptions import BookingError, ErrorKind
from barberbooking.domain.models import Interval


def test_find_conflict_returns_first_overlap():
    existing = [
        Interval(start=540, duration=30, buffer=15),
        Interval(start=600, duration=45, buffer=15),
        Interval(start=620, duration=30, buffer=15),
    ]
    proposed = Interval(start=610, duration=30, buffer=15)

    assert find_conflict(proposed, existing) == existing[1]


def test_find_conflict_none_when_touching():
    existing = [Interval(start=600, duration=30, buffer=15)]  # [600, 645)

    assert find_conflict(Interval(start=645, duration=30, buffer=15), existing) is None
    # [555, 600) ends where the booking starts
    assert find_conflict(Interval(start=555, duration=30, buffer=15), existing) is None


def test_ensure_no_conflict_raises_time_slot_unavailable():
    existing = [Interval(start=600, duration=30, buffer=15)]

    with pytest.raises(BookingError) as exc_info:
        ensure_no_conflict(Interval(start=615, duration=30, buffer=15), existing)

    assert exc_info.value.kind is ErrorKind.TIME_SLOT_UNAVAILABLE
    assert exc_info.value.message == "The selected time slot is not available"


def test_ensure_no_conflict_with_no_bookings():
    ensure_no_conflict(Interval(start=600, duration=30, buffer=15), [])
