"""
Shaping of appointment records and API payloads.
"""

import secrets
import string
from typing import Any, Dict, Mapping, Optional

import pendulum

from ..domain.models import Barber, Service
from ..domain.validation import AppointmentRequest

CONFIRMATION_CODE_ALPHABET = string.ascii_uppercase + string.digits
CONFIRMATION_CODE_LENGTH = 6


def generate_confirmation_code(length: int = CONFIRMATION_CODE_LENGTH) -> str:
    """Random code of uppercase letters and digits."""
    return "".join(secrets.choice(CONFIRMATION_CODE_ALPHABET) for _ in range(length))


class AppointmentMapper:
    """Builds the document stored for a new appointment."""

    def map(self, request: AppointmentRequest, created_at: Optional[pendulum.DateTime] = None) -> Dict[str, Any]:
        created = created_at or pendulum.now("UTC")
        return {
            "barberId": request.barber_id,
            "serviceId": request.service_id,
            "date": request.date,
            "time": request.time,
            "customerName": request.customer_name,
            "customerEmail": request.customer_email,
            "customerWhatsapp": request.customer_whatsapp,
            "paymentMethod": request.payment_method,
            "status": "confirmed",
            "createdAt": created.in_timezone("UTC").to_iso8601_string(),
            "confirmationCode": generate_confirmation_code(),
        }


class AppointmentResponseMapper:
    """Builds the API response for a created appointment."""

    def map(self, appointment: Mapping[str, Any], barber: Barber, service: Service, inserted_id: str) -> Dict[str, Any]:
        return {
            "id": str(inserted_id),
            "barber": {
                "id": barber.id,
                "name": barber.name,
                "specialty": barber.specialty,
            },
            "service": {
                "id": service.id,
                "name": service.name,
                "price": service.price,
                "duration": service.duration,
            },
            "date": appointment["date"],
            "time": appointment["time"],
            "customerName": appointment["customerName"],
            "customerEmail": appointment["customerEmail"],
            "customerWhatsapp": appointment["customerWhatsapp"],
            "paymentMethod": appointment["paymentMethod"],
            "status": appointment["status"],
            "createdAt": appointment["createdAt"],
            "confirmationCode": appointment["confirmationCode"],
        }


def build_confirmation_data(appointment: Mapping[str, Any], barber: Barber, service: Service) -> Dict[str, Any]:
    """Collect what the confirmation email template needs."""
    return {
        "customerEmail": appointment["customerEmail"],
        "customerName": appointment["customerName"],
        "barber": {"name": barber.name, "specialty": barber.specialty},
        "service": {"name": service.name, "price": service.price, "duration": service.duration},
        "date": appointment["date"],
        "time": appointment["time"],
        "confirmationCode": appointment["confirmationCode"],
        "customerWhatsapp": appointment.get("customerWhatsapp", ""),
        "paymentMethod": appointment.get("paymentMethod", "later"),
    }
