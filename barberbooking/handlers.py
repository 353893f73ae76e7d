"""
HTTP-style request handlers.

Each handler takes an already-decoded request body, calls the service layer
and shapes the result into an ``ApiResponse``. Routing and JSON decoding are
left to the hosting platform.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .domain.exceptions import BookingError, ErrorKind
from .request_logger import RequestLogger
from .services.appointment_service import AppointmentService, EmailSender
from .services.catalog_service import CatalogService

STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION_ERROR: 400,
    ErrorKind.INVALID_DATE: 400,
    ErrorKind.BARBER_NOT_FOUND: 404,
    ErrorKind.SERVICE_NOT_FOUND: 404,
    ErrorKind.APPOINTMENT_NOT_FOUND: 404,
    ErrorKind.BARBERS_NOT_FOUND: 404,
    ErrorKind.SERVICES_NOT_FOUND: 404,
    ErrorKind.TIME_SLOT_UNAVAILABLE: 409,
    ErrorKind.BARBER_UNAVAILABLE: 409,
    ErrorKind.EMAIL_SEND_FAILED: 500,
    ErrorKind.INTERNAL_ERROR: 500,
}


@dataclass
class ApiResponse:
    """Status code plus JSON-serialisable body."""
    status_code: int
    body: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=lambda: {"Content-Type": "application/json"})


def create_response(status_code: int, body: Dict[str, Any]) -> ApiResponse:
    return ApiResponse(status_code=status_code, body=body)


def success_response(data: Any, status_code: int = 200, message: Optional[str] = None) -> ApiResponse:
    body: Dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    return create_response(status_code, body)


def error_response(error: Exception, logger: Optional[RequestLogger] = None) -> ApiResponse:
    """
    Map an exception to an error response.

    Unknown exceptions are reported as ``INTERNAL_ERROR`` with a generic message.
    """
    if not isinstance(error, BookingError):
        if logger is not None:
            logger.exception("Unexpected error: %s", error)
        error = BookingError(ErrorKind.INTERNAL_ERROR)
    return create_response(
        STATUS_BY_KIND.get(error.kind, 500),
        {"success": False, "error": error.to_dict()},
    )


class BarbersHandler:
    def __init__(self, service: CatalogService):
        self.service = service

    def execute(self, body: Optional[Mapping[str, Any]] = None) -> ApiResponse:
        try:
            return success_response(self.service.get_available_barbers())
        except Exception as error:
            return error_response(error)


class ServicesHandler:
    def __init__(self, service: CatalogService):
        self.service = service

    def execute(self, body: Optional[Mapping[str, Any]] = None) -> ApiResponse:
        try:
            return success_response(self.service.get_available_services())
        except Exception as error:
            return error_response(error)


class TimeSlotsHandler:
    """Returns the free start times of a barber on a date."""

    def __init__(self, service: AppointmentService, logger: RequestLogger):
        self.service = service
        self.logger = logger

    def execute(self, body: Any) -> ApiResponse:
        try:
            self.logger.log_input("getAvailableTimeSlots", body)
            request = self.service.validate_time_slots_request(body)

            slots = self.service.get_available_time_slots(
                barber_id=request.barber_id,
                date=request.date,
                service_id=request.service_id,
            )

            self.logger.info("Time slots retrieved successfully", data={
                "barberId": request.barber_id,
                "serviceId": request.service_id,
                "date": request.date,
                "slotsCount": len(slots),
            })
            return success_response({"date": request.date, "availableSlots": slots})
        except Exception as error:
            self.logger.error("Error getting time slots", data={"errorCode": _code_of(error)})
            return error_response(error, self.logger)


class AppointmentHandler:
    """Creates an appointment."""

    def __init__(self, service: AppointmentService, logger: RequestLogger):
        self.service = service
        self.logger = logger

    def execute(self, body: Any) -> ApiResponse:
        try:
            self.logger.log_input("createAppointment", body)
            appointment = self.service.create_appointment(body)

            self.logger.info("Appointment created successfully", data={
                "appointmentId": appointment["id"],
                "barberId": appointment["barber"]["id"],
                "serviceId": appointment["service"]["id"],
                "date": appointment["date"],
                "time": appointment["time"],
            })
            return success_response(appointment, status_code=201, message="Appointment created successfully")
        except Exception as error:
            self.logger.error("Error creating appointment", data={"errorCode": _code_of(error)})
            return error_response(error, self.logger)


class AppointmentConfirmationHandler:
    """Sends the confirmation email of an existing appointment."""

    def __init__(self, service: AppointmentService, email_sender: EmailSender, logger: RequestLogger):
        self.service = service
        self.email_sender = email_sender
        self.logger = logger

    def execute(self, body: Any) -> ApiResponse:
        try:
            self.logger.log_input("sendConfirmationEmail", body)
            appointment_id = body.get("appointmentId") if isinstance(body, Mapping) else None

            result = self.service.send_confirmation_email(appointment_id, self.email_sender)

            self.logger.info("Confirmation email sent successfully", data={
                "appointmentId": appointment_id,
                "messageId": result["messageId"],
            })
            return success_response(result, message="Confirmation email sent successfully")
        except Exception as error:
            self.logger.error("Error sending confirmation email", data={"errorCode": _code_of(error)})
            return error_response(error, self.logger)


def _code_of(error: Exception) -> str:
    return error.code if isinstance(error, BookingError) else ErrorKind.INTERNAL_ERROR.value
