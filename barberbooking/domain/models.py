"""
Domain models for the availability engine and the shop catalog.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .timeconv import MINUTES_PER_DAY, to_minutes


def overlaps(start1: int, duration1: int, start2: int, duration2: int) -> bool:
    """
    Check whether two half-open minute intervals share any point in time.

    Durations are expected to already include any buffer the caller enforces.
    Touching endpoints (``start1 + duration1 == start2``) do not overlap.
    """
    return start1 < start2 + duration2 and start2 < start1 + duration1


@dataclass(frozen=True)
class BusinessWindow:
    """
    Daily span during which bookings are offered, in minutes since midnight.

    Invariant: 0 <= start < end <= 1440.
    """
    start: int = 540
    end: int = 1080

    def __post_init__(self):
        if not 0 <= self.start < self.end <= MINUTES_PER_DAY:
            raise ValueError(
                f"Business window must satisfy 0 <= start < end <= {MINUTES_PER_DAY}, "
                f"got {self.start}-{self.end}"
            )


@dataclass(frozen=True)
class Interval:
    """
    A booked or proposed appointment span.

    The effective blocked span is ``[start, start + duration + buffer)``.
    """
    start: int
    duration: int
    buffer: int = 0

    @property
    def blocked_minutes(self) -> int:
        """Minutes blocked including the trailing buffer."""
        return self.duration + self.buffer

    @property
    def end(self) -> int:
        return self.start + self.blocked_minutes

    def overlaps(self, other: "Interval") -> bool:
        """Check if the blocked spans of two intervals overlap."""
        return overlaps(self.start, self.blocked_minutes, other.start, other.blocked_minutes)


@dataclass(frozen=True)
class BookedAppointment:
    """
    Read-only snapshot of an existing booking fetched from the store.
    """
    barber_id: int
    date: str
    time: str
    service_id: Optional[int] = None
    appointment_id: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "BookedAppointment":
        """Build a snapshot from a raw store document (camelCase keys)."""
        raw_id = record.get("_id")
        return cls(
            barber_id=record["barberId"],
            date=record["date"],
            time=record["time"],
            service_id=record.get("serviceId"),
            appointment_id=str(raw_id) if raw_id is not None else None,
        )

    def to_interval(self, duration: int, buffer: int) -> Interval:
        """Expand the booking into its blocked interval."""
        return Interval(start=to_minutes(self.time), duration=duration, buffer=buffer)


@dataclass(frozen=True)
class Barber:
    """A barber from the static catalog."""
    id: int
    name: str
    specialty: str = ""
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Barber":
        known = {"id", "name", "specialty"}
        return cls(
            id=data["id"],
            name=data["name"],
            specialty=data.get("specialty", ""),
            extra={key: value for key, value in data.items() if key not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {**self.extra, "id": self.id, "name": self.name, "specialty": self.specialty}


@dataclass(frozen=True)
class Service:
    """A bookable service from the static catalog."""
    id: int
    name: str
    duration: int
    price: float
    category: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "duration": self.duration,
            "price": self.price,
            "category": self.category,
        }
