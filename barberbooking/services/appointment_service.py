"""
Application service for slot queries, bookings and confirmations.

The service coordinates the appointment store, the read-only catalog and the
email sender, and delegates all interval math to the domain layer
(``SlotCalculator`` and the booking guard). Collaborators are typed as
protocols so tests can plug in simple stubs.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Protocol

import pendulum
from pendulum import Date
from pydantic import ValidationError

from ..config import BusinessHoursConfig
from ..domain.booking_guard import ensure_no_conflict
from ..domain.catalog import Catalog
from ..domain.exceptions import BookingError, ErrorKind, StoreError
from ..domain.models import BookedAppointment, BusinessWindow, Interval
from ..domain.slot_calculator import SlotCalculator
from ..domain.timeconv import to_minutes
from ..domain.validation import (
    AppointmentRequest,
    TimeSlotsRequest,
    collect_field_errors,
    is_future_date,
    parse_booking_date,
)
from ..request_logger import RequestLogger
from .mappers import AppointmentMapper, AppointmentResponseMapper, build_confirmation_data


class AppointmentStore(Protocol):
    """Protocol describing the document store behaviour needed by the service."""

    def connect(self) -> None:
        """Open the connection."""

    def close(self) -> None:
        """Release the connection."""

    def find_active_appointments(self, barber_id: int, date: str) -> List[Dict[str, Any]]:
        """Return non-cancelled appointments of a barber on a date."""

    def insert_appointment(self, record: Dict[str, Any]) -> str:
        """Persist a new appointment and return its id."""

    def find_appointment(self, appointment_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a single appointment by id."""


class EmailSender(Protocol):
    """Protocol for the confirmation email transport."""

    def send_confirmation_email(self, appointment: Mapping[str, Any]) -> Dict[str, str]:
        """Send the email and return ``message_id`` and ``sent_at``."""


class AppointmentService:
    """
    Orchestrates availability queries and booking creation for one shop.

    Each store-touching operation opens the store and closes it again when the
    operation ends, whether it succeeded or not.
    """

    def __init__(
        self,
        store: AppointmentStore,
        catalog: Catalog,
        *,
        business_hours: Optional[BusinessHoursConfig] = None,
        timezone: str = "America/Sao_Paulo",
        clock: Optional[Callable[[], pendulum.DateTime]] = None,
        appointment_mapper: Optional[AppointmentMapper] = None,
        response_mapper: Optional[AppointmentResponseMapper] = None,
        logger: Optional[RequestLogger] = None,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._hours = business_hours or BusinessHoursConfig()
        self._timezone = timezone
        self._clock = clock or (lambda: pendulum.now(self._timezone))
        self._appointment_mapper = appointment_mapper or AppointmentMapper()
        self._response_mapper = response_mapper or AppointmentResponseMapper()
        self.logger = logger or RequestLogger(function_name="appointment-service")

    def today(self) -> Date:
        """Current date in the shop's timezone."""
        return self._clock().in_timezone(self._timezone).date()

    @contextmanager
    def _store_session(self) -> Iterator[AppointmentStore]:
        try:
            self._store.connect()
            yield self._store
        finally:
            self._store.close()

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_time_slots_request(self, data: Any) -> TimeSlotsRequest:
        """
        Validate the body of a time slots query.

        Raises:
            BookingError: ``VALIDATION_ERROR`` with field details
        """
        request, details = _parse(TimeSlotsRequest, data)
        if not isinstance(data, Mapping):
            raise BookingError(ErrorKind.VALIDATION_ERROR, details=details)
        failed = {detail["field"] for detail in details}

        if "date" not in failed and not is_future_date(data.get("date"), self.today()):
            details.append({"field": "date", "message": "Date must be in the future"})

        if details:
            raise BookingError(ErrorKind.VALIDATION_ERROR, details=details)
        return request

    def validate_appointment_request(self, data: Any) -> AppointmentRequest:
        """
        Validate a booking request, including catalog membership and date.

        Raises:
            BookingError: ``VALIDATION_ERROR`` with field details
        """
        request, details = _parse(AppointmentRequest, data)
        if not isinstance(data, Mapping):
            raise BookingError(ErrorKind.VALIDATION_ERROR, details=details)
        failed = {detail["field"] for detail in details}
        raw = data

        if "barberId" not in failed and self._catalog.find_barber(raw.get("barberId")) is None:
            details.append({"field": "barberId", "message": "Invalid barber ID"})

        if "serviceId" not in failed and self._catalog.find_service(raw.get("serviceId")) is None:
            details.append({"field": "serviceId", "message": "Invalid service ID"})

        if "date" not in failed and not is_future_date(raw.get("date"), self.today()):
            details.append({"field": "date", "message": "Date must be in the future"})

        if details:
            # Keep the order of the request fields
            order = list(AppointmentRequest.model_fields)
            aliases = [AppointmentRequest.model_fields[name].alias or name for name in order]
            details.sort(key=lambda d: aliases.index(d["field"]) if d["field"] in aliases else len(aliases))
            raise BookingError(ErrorKind.VALIDATION_ERROR, details=details)
        return request

    # ------------------------------------------------------------------
    # Availability
    # ------------------------------------------------------------------

    def get_available_time_slots(
        self,
        barber_id: int,
        date: str,
        service_id: Optional[int] = None,
        business_start: Optional[int] = None,
        business_end: Optional[int] = None,
        buffer_minutes: Optional[int] = None,
    ) -> List[str]:
        """
        List the free start times of a barber on a date.

        Args:
            barber_id: Catalog id of the barber
            date: Day to query, ``YYYY-MM-DD``, strictly after today
            service_id: Optional service; sets slot length and spacing
            business_start: Opening time in minutes (default from config)
            business_end: Closing time in minutes (default from config)
            buffer_minutes: Gap after each appointment (default from config)

        Returns:
            Ascending list of ``"HH:MM AM/PM"`` start times

        Raises:
            BookingError: ``BARBER_NOT_FOUND``, ``SERVICE_NOT_FOUND``,
                ``INVALID_DATE``, ``VALIDATION_ERROR`` or ``INTERNAL_ERROR``
        """
        log = self.logger
        start = self._hours.start_minutes if business_start is None else business_start
        end = self._hours.end_minutes if business_end is None else business_end
        buffer = self._hours.buffer_minutes if buffer_minutes is None else buffer_minutes

        barber = self._catalog.find_barber(barber_id)
        if barber is None:
            log.error("Barber not found", data={"barberId": barber_id})
            raise BookingError(ErrorKind.BARBER_NOT_FOUND)

        service_duration = self._hours.default_slot_minutes
        if service_id is not None:
            service = self._catalog.find_service(service_id)
            if service is None:
                log.error("Service not found", data={"serviceId": service_id})
                raise BookingError(ErrorKind.SERVICE_NOT_FOUND)
            service_duration = service.duration
        slot_interval = service_duration + buffer

        self._ensure_future_date(date)

        try:
            window = BusinessWindow(start=start, end=end)
        except ValueError as exc:
            log.error("Invalid business window", data={"businessStart": start, "businessEnd": end})
            raise BookingError(
                ErrorKind.VALIDATION_ERROR,
                details=[{"field": "businessHours", "message": str(exc)}],
            ) from exc
        calculator = SlotCalculator(window)

        log.log_before_db_operation("getAvailableTimeSlots", {
            "barberId": barber_id,
            "serviceId": service_id,
            "serviceDuration": service_duration,
            "slotInterval": slot_interval,
            "bufferMinutes": buffer,
            "date": date,
            "businessStart": start,
            "businessEnd": end,
        })

        try:
            with self._store_session() as store:
                records = store.find_active_appointments(barber_id, date)
        except StoreError as exc:
            log.error("Error getting available time slots", data={"barberId": barber_id, "date": date, "error": str(exc)})
            raise BookingError(
                ErrorKind.INTERNAL_ERROR,
                f"Error getting available time slots: {exc}",
            ) from exc

        booked = self._booked_intervals(records, buffer)
        slots = calculator.find_available_slots(
            booked=booked,
            service_duration=service_duration,
            buffer_minutes=buffer,
            slot_interval=slot_interval,
        )

        log.log_after_db_operation("getAvailableTimeSlots", {
            "barberId": barber_id,
            "serviceId": service_id,
            "date": date,
            "bookedAppointments": len(booked),
            "availableSlots": len(slots),
        })

        return slots

    def check_time_slot_availability(
        self,
        barber_id: int,
        date: str,
        time: str,
        service_id: Optional[int],
        buffer_minutes: Optional[int] = None,
    ) -> None:
        """
        Make sure a proposed booking does not collide with an existing one.

        A failing store is logged and treated as "available" so that an outage
        of the availability query does not block bookings.

        Raises:
            BookingError: ``TIME_SLOT_UNAVAILABLE`` on the first overlap
        """
        log = self.logger
        buffer = self._hours.buffer_minutes if buffer_minutes is None else buffer_minutes

        log.log_before_db_operation("checkTimeSlotAvailability", {
            "barberId": barber_id,
            "date": date,
            "time": time,
            "serviceId": service_id,
            "bufferMinutes": buffer,
        })

        proposed = Interval(
            start=to_minutes(time),
            duration=self._catalog.service_duration(service_id, self._hours.default_booking_minutes),
            buffer=buffer,
        )

        try:
            with self._store_session() as store:
                records = store.find_active_appointments(barber_id, date)
        except StoreError as exc:
            log.warning(
                "Error checking time slot availability, assuming available",
                data={"error": str(exc)},
            )
            return

        existing = self._booked_intervals(records, buffer)
        try:
            ensure_no_conflict(proposed, existing)
        except BookingError:
            log.warning("Time slot unavailable - overlapping appointment", data={
                "barberId": barber_id,
                "date": date,
                "time": time,
                "newAppointmentStart": proposed.start,
                "newAppointmentEnd": proposed.end,
                "bufferMinutes": buffer,
            })
            raise

        log.log_after_db_operation("checkTimeSlotAvailability", {
            "found": len(records),
            "available": True,
            "newAppointmentStart": proposed.start,
            "newAppointmentEnd": proposed.end,
        })

    # ------------------------------------------------------------------
    # Booking
    # ------------------------------------------------------------------

    def create_appointment(self, data: Any) -> Dict[str, Any]:
        """
        Validate, check availability and persist a new appointment.

        Returns:
            The created appointment in API response shape

        Raises:
            BookingError: ``VALIDATION_ERROR``, ``SERVICE_NOT_FOUND``,
                ``TIME_SLOT_UNAVAILABLE``, ``BARBER_UNAVAILABLE`` or
                ``INTERNAL_ERROR``
        """
        log = self.logger
        log.log_catalog_read("barbers", len(self._catalog.barbers))
        request = self.validate_appointment_request(data)

        log.log_catalog_read("services", len(self._catalog.services))
        service = self._catalog.find_service(request.service_id)
        if service is None:
            log.error("Service not found", data={"serviceId": request.service_id})
            raise BookingError(ErrorKind.SERVICE_NOT_FOUND)

        self.check_time_slot_availability(request.barber_id, request.date, request.time, request.service_id)

        barber = self._catalog.find_barber(request.barber_id)
        if barber is None:
            log.error("Barber not found", data={"barberId": request.barber_id})
            raise BookingError(ErrorKind.BARBER_UNAVAILABLE)

        appointment = self._appointment_mapper.map(request)

        log.log_before_db_operation("insertAppointment", {
            key: appointment[key]
            for key in ("barberId", "serviceId", "date", "time", "customerName",
                        "customerEmail", "paymentMethod", "status", "confirmationCode")
        })

        try:
            with self._store_session() as store:
                inserted_id = store.insert_appointment(appointment)
        except StoreError as exc:
            log.error("Error saving appointment to database", data={
                "barberId": appointment["barberId"],
                "serviceId": appointment["serviceId"],
                "date": appointment["date"],
                "time": appointment["time"],
                "error": str(exc),
            })
            raise BookingError(ErrorKind.INTERNAL_ERROR, f"Error creating appointment: {exc}") from exc

        log.log_after_db_operation("insertAppointment", {"insertedId": inserted_id})
        return self._response_mapper.map(appointment, barber, service, inserted_id)

    def send_confirmation_email(self, appointment_id: Optional[str], email_sender: EmailSender) -> Dict[str, Any]:
        """
        Look up an appointment and email its confirmation to the customer.

        Raises:
            BookingError: ``VALIDATION_ERROR``, ``APPOINTMENT_NOT_FOUND``,
                ``BARBER_NOT_FOUND``, ``SERVICE_NOT_FOUND``,
                ``EMAIL_SEND_FAILED`` or ``INTERNAL_ERROR``
        """
        log = self.logger
        if not appointment_id:
            raise BookingError(
                ErrorKind.VALIDATION_ERROR,
                details=[{"field": "appointmentId", "message": "Appointment ID is required"}],
            )

        log.log_before_db_operation("getAppointmentById", {"appointmentId": appointment_id})
        try:
            with self._store_session() as store:
                appointment = store.find_appointment(str(appointment_id))
        except StoreError as exc:
            log.error("Error sending confirmation email", data={"appointmentId": appointment_id, "error": str(exc)})
            raise BookingError(ErrorKind.INTERNAL_ERROR, f"Error sending confirmation email: {exc}") from exc
        log.log_after_db_operation("getAppointmentById", {"found": appointment is not None, "appointmentId": appointment_id})

        if appointment is None:
            log.error("Appointment not found", data={"appointmentId": appointment_id})
            raise BookingError(ErrorKind.APPOINTMENT_NOT_FOUND)

        barber = self._catalog.find_barber(appointment.get("barberId"))
        if barber is None:
            log.error("Barber not found", data={"barberId": appointment.get("barberId")})
            raise BookingError(ErrorKind.BARBER_NOT_FOUND)

        service = self._catalog.find_service(appointment.get("serviceId"))
        if service is None:
            log.error("Service not found", data={"serviceId": appointment.get("serviceId")})
            raise BookingError(ErrorKind.SERVICE_NOT_FOUND)

        try:
            result = email_sender.send_confirmation_email(build_confirmation_data(appointment, barber, service))
        except BookingError:
            raise
        except Exception as exc:
            log.error("Error sending confirmation email", data={"appointmentId": appointment_id, "error": str(exc)})
            raise BookingError(ErrorKind.INTERNAL_ERROR, f"Error sending confirmation email: {exc}") from exc

        log.info("Confirmation email sent successfully", data={
            "appointmentId": appointment_id,
            "customerEmail": appointment.get("customerEmail"),
            "messageId": result["message_id"],
        })

        return {
            "success": True,
            "appointmentId": appointment_id,
            "emailSent": True,
            "sentAt": result["sent_at"],
            "messageId": result["message_id"],
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _ensure_future_date(self, date: str) -> None:
        try:
            booking_date = parse_booking_date(date)
        except ValueError as exc:
            raise BookingError(
                ErrorKind.VALIDATION_ERROR,
                details=[{"field": "date", "message": str(exc)}],
            ) from exc

        if booking_date <= self.today():
            self.logger.error("Date must be in the future", data={"date": date})
            raise BookingError(ErrorKind.INVALID_DATE)

    def _booked_intervals(self, records: List[Dict[str, Any]], buffer: int) -> List[Interval]:
        """
        Expand stored appointments into blocked intervals.

        Records that cannot be parsed are skipped with a warning.
        """
        intervals: List[Interval] = []
        for record in records:
            try:
                booked = BookedAppointment.from_record(record)
                duration = self._catalog.service_duration(booked.service_id, self._hours.default_booking_minutes)
                intervals.append(booked.to_interval(duration, buffer))
            except (KeyError, ValueError) as exc:
                self.logger.warning("Skipping unreadable appointment", data={"id": str(record.get("_id")), "error": str(exc)})
        return intervals


def _parse(model, data: Any):
    """Validate ``data`` against a request model, returning (model, details)."""
    if not isinstance(data, Mapping):
        return None, [{"field": "body", "message": "Request body must be an object"}]
    try:
        return model.model_validate(data), []
    except ValidationError as exc:
        return None, collect_field_errors(exc, model)
