"""
Listing of barbers and services for the booking form.
"""

from typing import Any, Dict, List

from ..domain.catalog import Catalog
from ..domain.exceptions import BookingError, ErrorKind


class CatalogService:
    """Read-only views over the injected catalog."""

    def __init__(self, catalog: Catalog):
        self._catalog = catalog

    def get_available_barbers(self) -> List[Dict[str, Any]]:
        if not self._catalog.barbers:
            raise BookingError(ErrorKind.BARBERS_NOT_FOUND)
        return [barber.to_dict() for barber in self._catalog.barbers]

    def get_available_services(self) -> List[Dict[str, Any]]:
        """All services, tagged with their category and sorted by id."""
        services = self._catalog.sorted_services()
        if not services:
            raise BookingError(ErrorKind.SERVICES_NOT_FOUND)
        return [service.to_dict() for service in services]
