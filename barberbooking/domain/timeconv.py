"""
Conversions between 12-hour clock strings and minutes since midnight.

Appointments are stored with a ``"HH:MM AM/PM"`` time; all interval math runs
on integer minute offsets in ``[0, 1440)``.
"""

import re

MINUTES_PER_DAY = 24 * 60
NOON = 12 * 60

TIME_PATTERN = re.compile(r"^(0?[1-9]|1[0-2]):([0-5][0-9])\s?(AM|PM)$", re.IGNORECASE)


def is_valid_time_of_day(value: str) -> bool:
    """Check whether a string is an accepted ``H:MM AM/PM`` time."""
    return isinstance(value, str) and TIME_PATTERN.fullmatch(value) is not None


def to_minutes(value: str) -> int:
    """
    Convert a ``"H:MM AM/PM"`` string to minutes since midnight.

    12 AM maps to 0 and 12 PM to 720; every other PM hour adds 720 minutes.

    Raises:
        ValueError: If the string is not a valid 12-hour time
    """
    match = TIME_PATTERN.fullmatch(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise ValueError(f"Time must be in format HH:MM AM/PM, got {value!r}")

    hours = int(match.group(1))
    minutes = int(match.group(2))
    period = match.group(3).upper()

    total = hours * 60 + minutes
    if period == "PM" and hours != 12:
        total += NOON
    elif period == "AM" and hours == 12:
        total -= NOON
    return total


def to_time_of_day(offset: int) -> str:
    """
    Convert minutes since midnight to a zero-padded ``"HH:MM AM/PM"`` string.

    Raises:
        ValueError: If the offset falls outside a single day
    """
    if not 0 <= offset < MINUTES_PER_DAY:
        raise ValueError(f"Minute offset must be between 0 and {MINUTES_PER_DAY - 1}, got {offset}")

    hours, minutes = divmod(offset, 60)
    period = "PM" if hours >= 12 else "AM"
    hour12 = hours % 12 or 12
    return f"{hour12:02d}:{minutes:02d} {period}"
