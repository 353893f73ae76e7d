"""
Tests for the MongoDB appointment store using an in-process fake client.
"""

from types import SimpleNamespace

import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

from barberbooking.adapters.appointment_store import MongoAppointmentStore
from barberbooking.config import StoreConfig
from barberbooking.domain.exceptions import StoreError


class FakeCollection:
    def __init__(self, fail=False):
        self.docs = []
        self.queries = []
        self.fail = fail

    def find(self, query):
        if self.fail:
            raise ServerSelectionTimeoutError("no servers")
        self.queries.append(query)
        return iter([d for d in self.docs if d["barberId"] == query["barberId"] and d["date"] == query["date"]])

    def insert_one(self, doc):
        doc = {**doc, "_id": ObjectId()}
        self.docs.append(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    def find_one(self, query):
        return next((d for d in self.docs if d["_id"] == query["_id"]), None)


class FakeClient:
    def __init__(self, collection):
        self.collection = collection
        self.closed = False
        self.opened_with = None

    def __getitem__(self, name):
        return {"appointments": self.collection}

    def close(self):
        self.closed = True


def make_store(collection):
    clients = []

    def factory(uri, **kwargs):
        client = FakeClient(collection)
        client.opened_with = (uri, kwargs)
        clients.append(client)
        return client

    return MongoAppointmentStore(StoreConfig(timeout_ms=1000), client_factory=factory), clients


def test_connect_is_idempotent_and_close_releases_client():
    store, clients = make_store(FakeCollection())

    store.connect()
    store.connect()
    store.close()
    store.close()

    assert len(clients) == 1
    assert clients[0].opened_with == ("mongodb://localhost:27017", {"serverSelectionTimeoutMS": 1000})
    assert clients[0].closed


def test_query_excludes_cancelled():
    collection = FakeCollection()
    store, _ = make_store(collection)
    store.connect()

    store.find_active_appointments(1, "2030-01-15")

    assert collection.queries[0] == {"barberId": 1, "date": "2030-01-15", "status": {"$ne": "cancelled"}}


def test_insert_and_find():
    store, _ = make_store(FakeCollection())
    store.connect()

    inserted_id = store.insert_appointment({"barberId": 1, "date": "2030-01-15", "time": "10:00 AM"})

    assert isinstance(inserted_id, str)
    assert store.find_appointment(inserted_id)["time"] == "10:00 AM"


def test_malformed_id_is_unknown():
    store, _ = make_store(FakeCollection())
    store.connect()

    assert store.find_appointment("not-an-object-id") is None


def test_driver_errors_become_store_errors():
    store, _ = make_store(FakeCollection(fail=True))
    store.connect()

    with pytest.raises(StoreError, match="no servers"):
        store.find_active_appointments(1, "2030-01-15")


def test_use_before_connect():
    store, _ = make_store(FakeCollection())

    with pytest.raises(StoreError, match="not connected"):
        store.find_active_appointments(1, "2030-01-15")
