"""
MongoDB-compatible document store for appointments (pymongo).

Works against MongoDB and Cosmos DB's Mongo API. The store is opened and
closed around each request by the service layer.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from ..config import StoreConfig
from ..domain.exceptions import StoreError

logger = logging.getLogger(__name__)


class MongoAppointmentStore:
    """
    Appointment collection access.

    Every public method raises ``StoreError`` when the driver fails.
    """

    def __init__(self, config: StoreConfig, client_factory=MongoClient):
        """
        Initialize the store.

        Args:
            config: Connection settings
            client_factory: Callable building a ``MongoClient``; replaced in tests
        """
        self.config = config
        self._client_factory = client_factory
        self._client: Optional[MongoClient] = None
        self._collection: Optional[Collection] = None

    @property
    def collection(self) -> Collection:
        if self._collection is None:
            raise StoreError("Appointment store is not connected")
        return self._collection

    def connect(self) -> None:
        """Open the client and select the collection (no-op if already open)."""
        if self._client is not None:
            return
        try:
            self._client = self._client_factory(
                self.config.uri,
                serverSelectionTimeoutMS=self.config.timeout_ms,
            )
            database = self._client[self.config.database]
            self._collection = database[self.config.collection]
        except PyMongoError as exc:
            self._client = None
            self._collection = None
            raise StoreError(f"Failed to connect to appointment store: {exc}") from exc
        logger.debug("Connected to %s/%s", self.config.database, self.config.collection)

    def close(self) -> None:
        """Close the client; safe to call when not connected."""
        client, self._client, self._collection = self._client, None, None
        if client is not None:
            client.close()

    def find_active_appointments(self, barber_id: int, date: str) -> List[Dict[str, Any]]:
        """Return all non-cancelled appointments of a barber on a date."""
        query = {"barberId": barber_id, "date": date, "status": {"$ne": "cancelled"}}
        try:
            return list(self.collection.find(query))
        except PyMongoError as exc:
            raise StoreError(f"Failed to query appointments: {exc}") from exc

    def insert_appointment(self, record: Dict[str, Any]) -> str:
        """Insert a new appointment and return its id as a string."""
        try:
            result = self.collection.insert_one(dict(record))
        except PyMongoError as exc:
            raise StoreError(f"Failed to insert appointment: {exc}") from exc
        return str(result.inserted_id)

    def find_appointment(self, appointment_id: str) -> Optional[Dict[str, Any]]:
        """Fetch an appointment by id; malformed ids are treated as unknown."""
        try:
            object_id = ObjectId(appointment_id)
        except (InvalidId, TypeError):
            logger.info("Malformed appointment id: %s", appointment_id)
            return None

        try:
            return self.collection.find_one({"_id": object_id})
        except PyMongoError as exc:
            raise StoreError(f"Failed to fetch appointment: {exc}") from exc
