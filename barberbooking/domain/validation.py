"""
Request models and field rules for booking input.

Pydantic does the type and shape checks; ``collect_field_errors`` turns its
errors into the ``{"field", "message"}`` details returned to API clients.
"""

import re
from typing import Any, Dict, List, Literal, Mapping, Optional

import pendulum
from pendulum import Date
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError, field_validator, model_validator

from .timeconv import is_valid_time_of_day

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

FIELD_LABELS: Dict[str, str] = {
    "barberId": "Barber ID",
    "serviceId": "Service ID",
    "date": "Date",
    "time": "Time",
    "customerName": "Customer name",
    "customerEmail": "Customer email",
    "customerWhatsapp": "Customer WhatsApp",
    "paymentMethod": "Payment method",
    "appointmentId": "Appointment ID",
}


def parse_booking_date(value: str) -> Date:
    """
    Parse a ``YYYY-MM-DD`` string into a calendar date.

    Raises:
        ValueError: If the string is not a real date in that format
    """
    if not isinstance(value, str) or not DATE_PATTERN.fullmatch(value):
        raise ValueError("Date must be in format YYYY-MM-DD")
    try:
        return pendulum.from_format(value, "YYYY-MM-DD").date()
    except ValueError as exc:
        raise ValueError("Date must be in format YYYY-MM-DD") from exc


def is_future_date(value: str, today: Date) -> bool:
    """Check that a booking date falls strictly after ``today``."""
    return parse_booking_date(value) > today


class _BlankAsMissing(BaseModel):
    """Base model that treats ``None`` and empty strings as absent fields."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {key: value for key, value in data.items() if value is not None and value != ""}
        return data


class TimeSlotsRequest(_BlankAsMissing):
    """Input for the available time slots query."""
    barber_id: StrictInt = Field(alias="barberId")
    service_id: Optional[StrictInt] = Field(default=None, alias="serviceId")
    date: StrictStr

    @field_validator("date")
    @classmethod
    def validate_date_format(cls, value: str) -> str:
        parse_booking_date(value)
        return value


class AppointmentRequest(_BlankAsMissing):
    """Input for creating an appointment."""
    barber_id: StrictInt = Field(alias="barberId")
    service_id: StrictInt = Field(alias="serviceId")
    date: StrictStr
    time: StrictStr
    customer_name: StrictStr = Field(alias="customerName", min_length=3, max_length=100)
    customer_email: StrictStr = Field(alias="customerEmail")
    customer_whatsapp: StrictStr = Field(alias="customerWhatsapp")
    payment_method: Literal["later", "now"] = Field(alias="paymentMethod")

    @field_validator("date")
    @classmethod
    def validate_date_format(cls, value: str) -> str:
        parse_booking_date(value)
        return value

    @field_validator("time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        if not is_valid_time_of_day(value):
            raise ValueError("Time must be in format HH:MM AM/PM")
        return value

    @field_validator("customer_email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        if not EMAIL_PATTERN.fullmatch(value):
            raise ValueError("Invalid email format")
        return value


def collect_field_errors(exc: ValidationError, model: type[BaseModel]) -> List[Dict[str, str]]:
    """Translate a pydantic ``ValidationError`` into field/message details."""
    aliases = {name: (info.alias or name) for name, info in model.model_fields.items()}
    details: List[Dict[str, str]] = []
    seen: set[str] = set()

    for error in exc.errors():
        loc = error.get("loc") or ("",)
        field = aliases.get(str(loc[0]), str(loc[0]))
        if field in seen:
            continue
        seen.add(field)
        details.append({"field": field, "message": _message_for(field, error)})

    return details


def _message_for(field: str, error: Mapping[str, Any]) -> str:
    label = FIELD_LABELS.get(field, field)
    error_type = error.get("type", "")

    if error_type == "missing":
        return f"{label} is required"
    if error_type in ("int_type", "int_parsing"):
        return f"{label} must be a number"
    if error_type == "string_type":
        return f"{label} must be a string"
    if error_type in ("string_too_short", "string_too_long"):
        return f"{label} must be between 3 and 100 characters"
    if error_type == "literal_error":
        return f'{label} must be either "later" or "now"'
    if error_type == "value_error":
        ctx = error.get("ctx") or {}
        return str(ctx.get("error", error.get("msg", "")))
    return str(error.get("msg", f"Invalid {label}"))
