"""
Read-only catalog of barbers and services.

The catalog is built once at startup (usually from the bundled JSON resources)
and handed to the services that read it; nothing mutates it afterwards.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .models import Barber, Service

RESOURCES_DIR = Path(__file__).resolve().parent.parent / "resources"

DEFAULT_BOOKING_DURATION = 45


class Catalog:
    """
    Lookup of barbers and services by id.

    Services keep the order of their categories in the source file; the
    flattened listing is sorted by id.
    """

    def __init__(self, barbers: Sequence[Barber], services: Sequence[Service]):
        self._barbers: Tuple[Barber, ...] = tuple(barbers)
        self._services: Tuple[Service, ...] = tuple(services)
        self._barbers_by_id: Dict[int, Barber] = {b.id: b for b in self._barbers}
        self._services_by_id: Dict[int, Service] = {}
        for service in self._services:
            # First definition wins when an id is repeated across categories
            self._services_by_id.setdefault(service.id, service)

    @classmethod
    def from_data(
        cls,
        barbers: Sequence[Mapping[str, Any]],
        service_categories: Sequence[Mapping[str, Any]],
    ) -> "Catalog":
        """
        Build a catalog from decoded JSON structures.

        ``service_categories`` is a list of ``{"categoryName", "services": [...]}``.
        """
        services: List[Service] = []
        for category in service_categories:
            category_name = category.get("categoryName", "")
            for item in category.get("services", []):
                services.append(
                    Service(
                        id=item["id"],
                        name=item["name"],
                        duration=int(item["duration"]),
                        price=float(item["price"]),
                        category=category_name,
                    )
                )
        return cls(barbers=[Barber.from_dict(b) for b in barbers], services=services)

    @classmethod
    def load(cls, resources_dir: Path | None = None) -> "Catalog":
        """
        Load ``barbers.json`` and ``services.json`` from a directory.

        Raises:
            FileNotFoundError: If a catalog file is missing
            ValueError: If a catalog file is not valid JSON
        """
        directory = resources_dir or RESOURCES_DIR
        barbers = _read_json(directory / "barbers.json")
        categories = _read_json(directory / "services.json")
        return cls.from_data(barbers, categories)

    @property
    def barbers(self) -> Tuple[Barber, ...]:
        return self._barbers

    @property
    def services(self) -> Tuple[Service, ...]:
        return self._services

    def find_barber(self, barber_id: int) -> Optional[Barber]:
        return self._barbers_by_id.get(barber_id)

    def find_service(self, service_id: int) -> Optional[Service]:
        return self._services_by_id.get(service_id)

    def service_duration(self, service_id: Optional[int], default: int = DEFAULT_BOOKING_DURATION) -> int:
        """Duration of a service in minutes, or ``default`` for unknown ids."""
        service = self._services_by_id.get(service_id) if service_id is not None else None
        return service.duration if service else default

    def sorted_services(self) -> List[Service]:
        """All services sorted by id."""
        return sorted(self._services, key=lambda s: s.id)


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
