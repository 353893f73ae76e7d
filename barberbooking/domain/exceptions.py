"""
Domain-specific error types for the booking backend.

Every failure a caller is expected to react to carries an ``ErrorKind`` so the
handler layer can map it to a status code without string matching.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional


class ErrorKind(str, Enum):
    """Enumeration of error codes surfaced to API clients."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    BARBER_NOT_FOUND = "BARBER_NOT_FOUND"
    SERVICE_NOT_FOUND = "SERVICE_NOT_FOUND"
    INVALID_DATE = "INVALID_DATE"
    TIME_SLOT_UNAVAILABLE = "TIME_SLOT_UNAVAILABLE"
    BARBER_UNAVAILABLE = "BARBER_UNAVAILABLE"
    APPOINTMENT_NOT_FOUND = "APPOINTMENT_NOT_FOUND"
    EMAIL_SEND_FAILED = "EMAIL_SEND_FAILED"
    BARBERS_NOT_FOUND = "BARBERS_NOT_FOUND"
    SERVICES_NOT_FOUND = "SERVICES_NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


DEFAULT_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.VALIDATION_ERROR: "Invalid input data",
    ErrorKind.BARBER_NOT_FOUND: "Barber not found",
    ErrorKind.SERVICE_NOT_FOUND: "Service not found",
    ErrorKind.INVALID_DATE: "Date must be in the future",
    ErrorKind.TIME_SLOT_UNAVAILABLE: "The selected time slot is not available",
    ErrorKind.BARBER_UNAVAILABLE: "Barber is not available at the selected time",
    ErrorKind.APPOINTMENT_NOT_FOUND: "Appointment not found",
    ErrorKind.EMAIL_SEND_FAILED: "Failed to send confirmation email",
    ErrorKind.BARBERS_NOT_FOUND: "No barbers available",
    ErrorKind.SERVICES_NOT_FOUND: "No services available",
    ErrorKind.INTERNAL_ERROR: "An error occurred",
}


class BookingError(Exception):
    """
    Application-level error tagged with an ``ErrorKind``.

    ``details`` holds field-level problems for validation failures, each as a
    ``{"field": ..., "message": ...}`` mapping.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: Optional[str] = None,
        details: Optional[List[Dict[str, str]]] = None,
    ) -> None:
        self.kind = kind
        self.message = message or DEFAULT_MESSAGES[kind]
        self.details = list(details or [])
        super().__init__(self.message)

    @property
    def code(self) -> str:
        """Wire representation of the error kind."""
        return self.kind.value

    def to_dict(self) -> Dict[str, object]:
        """Serialise into the ``error`` object of an API response."""
        payload: Dict[str, object] = {"code": self.code, "message": self.message}
        if self.kind is ErrorKind.VALIDATION_ERROR:
            payload["details"] = self.details
        return payload


class StoreError(Exception):
    """Raised when the appointment store cannot be reached or queried."""
