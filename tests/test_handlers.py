"""
Tests for the HTTP-style handlers and the per-invocation wiring.
"""

import pendulum
import pytest

from barberbooking.adapters.in_memory_store import InMemoryAppointmentStore
from barberbooking.config import AppConfig
from barberbooking.domain.exceptions import BookingError, ErrorKind, StoreError
from barberbooking.functions import BookingApp
from barberbooking.handlers import BarbersHandler, error_response, success_response


def fixed_clock():
    return pendulum.datetime(2030, 1, 10, 9, tz="America/Sao_Paulo")


class RecordingSender:
    def __init__(self):
        self.sent = []

    def send_confirmation_email(self, appointment):
        self.sent.append(appointment)
        return {"message_id": "<id@mock.local>", "sent_at": "2030-01-10T12:00:00Z"}


class BrokenStore(InMemoryAppointmentStore):
    def find_active_appointments(self, barber_id, date):
        raise StoreError("timeout")


@pytest.fixture
def store():
    return InMemoryAppointmentStore.from_seed_file()


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def booking_app(store, sender):
    return BookingApp(AppConfig(), store_factory=lambda: store, email_sender=sender, clock=fixed_clock)


def appointment_body(**overrides):
    body = {
        "barberId": 3,
        "serviceId": 4,
        "date": "2030-01-15",
        "time": "11:00 AM",
        "customerName": "Lucas Pereira",
        "customerEmail": "lucas@example.com",
        "customerWhatsapp": "+55 11 98888-7777",
        "paymentMethod": "now",
    }
    body.update(overrides)
    return body


class TestResponses:
    """Tests for response helpers."""

    def test_success_response(self):
        response = success_response([1, 2], status_code=201, message="ok")

        assert response.status_code == 201
        assert response.body == {"success": True, "data": [1, 2], "message": "ok"}
        assert response.headers["Content-Type"] == "application/json"

    def test_error_response_for_booking_error(self):
        response = error_response(BookingError(ErrorKind.TIME_SLOT_UNAVAILABLE))

        assert response.status_code == 409
        assert response.body == {
            "success": False,
            "error": {"code": "TIME_SLOT_UNAVAILABLE", "message": "The selected time slot is not available"},
        }

    def test_unexpected_error_is_hidden(self):
        response = error_response(RuntimeError("boom"))

        assert response.status_code == 500
        assert response.body["error"] == {"code": "INTERNAL_ERROR", "message": "An error occurred"}

    def test_handler_catches_unexpected_errors(self):
        class ExplodingCatalogService:
            def get_available_barbers(self):
                raise RuntimeError("disk on fire")

        response = BarbersHandler(ExplodingCatalogService()).execute()

        assert response.status_code == 500
        assert response.body["error"]["code"] == "INTERNAL_ERROR"


class TestBookingApp:
    """End-to-end tests through BookingApp with an in-memory store."""

    def test_barbers_and_services(self, booking_app):
        barbers = booking_app.barbers()
        services = booking_app.services()

        assert barbers.status_code == 200
        assert [b["id"] for b in barbers.body["data"]] == [1, 2, 3]
        assert services.status_code == 200
        assert services.body["data"][0]["category"] == "Cabelo"

    def test_time_slots(self, booking_app):
        response = booking_app.time_slots({"barberId": 1, "date": "2030-01-15", "serviceId": 1})

        assert response.status_code == 200
        assert response.body["data"]["date"] == "2030-01-15"
        assert "09:00 AM" in response.body["data"]["availableSlots"]
        assert "10:30 AM" not in response.body["data"]["availableSlots"]

    def test_time_slots_validation_error(self, booking_app):
        response = booking_app.time_slots({"barberId": "abc"})

        assert response.status_code == 400
        assert response.body["error"]["code"] == "VALIDATION_ERROR"
        assert {d["field"] for d in response.body["error"]["details"]} == {"barberId", "date"}

    def test_time_slots_unknown_barber(self, booking_app):
        response = booking_app.time_slots({"barberId": 42, "date": "2030-01-15"})

        assert response.status_code == 404
        assert response.body["error"]["code"] == "BARBER_NOT_FOUND"

    def test_time_slots_store_down(self, sender):
        booking_app = BookingApp(AppConfig(), store_factory=BrokenStore, email_sender=sender, clock=fixed_clock)

        response = booking_app.time_slots({"barberId": 1, "date": "2030-01-15"})

        assert response.status_code == 500
        assert response.body["error"]["code"] == "INTERNAL_ERROR"
        assert "details" not in response.body["error"]

    def test_create_and_confirm(self, booking_app, sender):
        created = booking_app.appointments(appointment_body())

        assert created.status_code == 201
        assert created.body["message"] == "Appointment created successfully"
        appointment_id = created.body["data"]["id"]

        confirmed = booking_app.appointment_confirmation({"appointmentId": appointment_id})

        assert confirmed.status_code == 200
        assert confirmed.body["data"]["emailSent"] is True
        assert sender.sent[0]["customerName"] == "Lucas Pereira"

    def test_conflicting_booking(self, booking_app):
        response = booking_app.appointments(appointment_body(barberId=1, serviceId=1, time="10:15 AM"))

        assert response.status_code == 409
        assert response.body["error"]["code"] == "TIME_SLOT_UNAVAILABLE"

    def test_invalid_booking(self, booking_app):
        response = booking_app.appointments(appointment_body(customerEmail="nope"))

        assert response.status_code == 400
        assert response.body["error"]["details"] == [{"field": "customerEmail", "message": "Invalid email format"}]

    def test_confirmation_for_unknown_appointment(self, booking_app):
        response = booking_app.appointment_confirmation({"appointmentId": "ffffffffffffffffffffffff"})

        assert response.status_code == 404
        assert response.body["error"]["code"] == "APPOINTMENT_NOT_FOUND"

    def test_confirmation_without_body(self, booking_app):
        response = booking_app.appointment_confirmation(None)

        assert response.status_code == 400
        assert response.body["error"]["code"] == "VALIDATION_ERROR"

    def test_confirmation_email_failure(self, store):
        class FailingSender:
            def send_confirmation_email(self, appointment):
                raise BookingError(ErrorKind.EMAIL_SEND_FAILED)

        booking_app = BookingApp(AppConfig(), store_factory=lambda: store, email_sender=FailingSender(), clock=fixed_clock)

        response = booking_app.appointment_confirmation({"appointmentId": "000000000000000000000002"})

        assert response.status_code == 500
        assert response.body["error"] == {"code": "EMAIL_SEND_FAILED", "message": "Failed to send confirmation email"}
