"""
Domain layer - Pure business logic without external dependencies.
"""

from .catalog import Catalog
from .exceptions import BookingError, ErrorKind, StoreError
from .models import BookedAppointment, Barber, BusinessWindow, Interval, Service, overlaps
from .slot_calculator import SlotCalculator
from .timeconv import to_minutes, to_time_of_day

__all__ = [
    "BookedAppointment",
    "Barber",
    "BookingError",
    "BusinessWindow",
    "Catalog",
    "ErrorKind",
    "Interval",
    "Service",
    "SlotCalculator",
    "StoreError",
    "overlaps",
    "to_minutes",
    "to_time_of_day",
]
