"""
Overlap guard for a single proposed booking.
"""

from typing import Iterable, Optional

from .exceptions import BookingError, ErrorKind
from .models import Interval


def find_conflict(proposed: Interval, existing: Iterable[Interval]) -> Optional[Interval]:
    """Return the first existing interval that overlaps the proposed one."""
    for interval in existing:
        if proposed.overlaps(interval):
            return interval
    return None


def ensure_no_conflict(proposed: Interval, existing: Iterable[Interval]) -> None:
    """
    Raise if the proposed interval collides with any existing booking.

    Raises:
        BookingError: ``TIME_SLOT_UNAVAILABLE`` on the first overlap found
    """
    if find_conflict(proposed, existing) is not None:
        raise BookingError(ErrorKind.TIME_SLOT_UNAVAILABLE)
