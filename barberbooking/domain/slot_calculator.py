"""
Core business logic for calculating available appointment start times.

Pure domain logic without any external dependencies (no database, no I/O):
the caller fetches existing bookings and hands them in as intervals.
"""

from typing import Iterable, List, Sequence

from .models import BusinessWindow, Interval, overlaps
from .timeconv import to_time_of_day

__all__ = ["SlotCalculator", "overlaps"]


class SlotCalculator:
    """
    Calculates free start times for one barber on one day.

    Algorithm:
    1. Generate candidate start times across the business window on a fixed grid
    2. Add the last schedulable start time if it is off the grid
    3. Drop candidates that would run past closing time
    4. Drop candidates whose blocked span overlaps any booked interval
    """

    def __init__(self, window: BusinessWindow):
        self.window = window

    def find_available_slots(
        self,
        booked: Iterable[Interval],
        service_duration: int,
        buffer_minutes: int,
        slot_interval: int,
    ) -> List[str]:
        """
        Find all free start times, formatted as ``"HH:MM AM/PM"``.

        Args:
            booked: Blocked intervals of the existing bookings
            service_duration: Duration of the requested service in minutes
            buffer_minutes: Gap enforced after every appointment
            slot_interval: Step between generated candidates

        Returns:
            Ascending list of available start times
        """
        candidates = self.generate_candidates(service_duration, slot_interval)
        available = self.filter_available(
            candidates=candidates,
            booked=list(booked),
            service_duration=service_duration,
            buffer_minutes=buffer_minutes,
        )
        return [to_time_of_day(minutes) for minutes in available]

    def generate_candidates(self, service_duration: int, slot_interval: int) -> List[int]:
        """
        Generate candidate start times across the business window.

        Candidates start at the window opening and advance by ``slot_interval``
        while the service still fits before closing. When the last possible
        start time is off that grid, it is appended once so the final slot
        before closing is always offered.

        Example:
        Window: 540 - 1080, duration 30, interval 45
        Result: [540, 585, ..., 1035, 1050]
        """
        if slot_interval <= 0:
            raise ValueError(f"Slot interval must be positive, got {slot_interval}")

        last_possible_slot = self.window.end - service_duration
        candidates: List[int] = []

        minutes = self.window.start
        while minutes <= last_possible_slot:
            candidates.append(minutes)
            minutes += slot_interval

        if (
            candidates
            and last_possible_slot > self.window.start
            and last_possible_slot not in candidates
            and last_possible_slot > candidates[-1]
        ):
            candidates.append(last_possible_slot)

        return candidates

    def filter_available(
        self,
        candidates: Sequence[int],
        booked: Sequence[Interval],
        service_duration: int,
        buffer_minutes: int,
    ) -> List[int]:
        """
        Remove candidates that run past closing or collide with a booking.

        Each candidate blocks ``service_duration + buffer_minutes``; each booked
        interval blocks its own duration plus buffer.
        """
        available: List[int] = []

        for slot_start in candidates:
            # Would run past closing time
            if slot_start + service_duration > self.window.end:
                continue

            blocked = service_duration + buffer_minutes
            if any(
                overlaps(slot_start, blocked, interval.start, interval.blocked_minutes)
                for interval in booked
            ):
                continue

            available.append(slot_start)

        return available
