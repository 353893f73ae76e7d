"""
In-memory appointment store for mock mode and local testing.
"""

import copy
import json
import uuid
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional


class InMemoryAppointmentStore:
    """
    Store that keeps appointments in a list.

    Mirrors ``MongoAppointmentStore`` so it can stand in for it without a
    database. Optionally seeded from ``mock_appointments.json``.
    """

    def __init__(self, records: Optional[Iterable[Dict[str, Any]]] = None):
        self.records: List[Dict[str, Any]] = [copy.deepcopy(r) for r in records or []]
        self.connect_calls = 0
        self.close_calls = 0

    @classmethod
    def from_seed_file(cls, path: Path | None = None) -> "InMemoryAppointmentStore":
        """Load seed appointments from a JSON file (empty store if missing)."""
        data_file = path or Path(__file__).parent / "mock_appointments.json"

        if data_file.exists():
            with open(data_file, "r", encoding="utf-8") as f:
                return cls(json.load(f))

        return cls()

    def connect(self) -> None:
        self.connect_calls += 1

    def close(self) -> None:
        self.close_calls += 1

    def find_active_appointments(self, barber_id: int, date: str) -> List[Dict[str, Any]]:
        return [
            copy.deepcopy(record)
            for record in self.records
            if record.get("barberId") == barber_id
            and record.get("date") == date
            and record.get("status") != "cancelled"
        ]

    def insert_appointment(self, record: Dict[str, Any]) -> str:
        appointment_id = uuid.uuid4().hex[:24]
        stored = copy.deepcopy(record)
        stored["_id"] = appointment_id
        self.records.append(stored)
        return appointment_id

    def find_appointment(self, appointment_id: str) -> Optional[Dict[str, Any]]:
        for record in self.records:
            if record.get("_id") == appointment_id:
                return copy.deepcopy(record)
        return None
