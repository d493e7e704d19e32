# tests/conftest.py

import os
import sys

# Add the project root (the folder containing `app/`) to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Settings are read at import time, so they must exist before `app` is imported
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("MONGODB_USERNAME", "test")
os.environ.setdefault("MONGODB_PASSWORD", "test")
os.environ.setdefault("CHAT_WEBHOOK_URL", "http://workflow.test/webhook/clinic-chat")
os.environ.setdefault("CHAT_WEBHOOK_TIMEOUT", "2")

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from app.main import app
from app.routers.deps import get_chat_relay, get_patients_collection
from app.services.chat_relay import ChatRelay
from app.utils.errors import ForwardError


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def sort(self, key, direction=1):
        self.docs = sorted(self.docs, key=lambda d: d[key], reverse=direction < 0)
        return self

    async def to_list(self, length=None):
        return list(self.docs[:length] if length else self.docs)


class FakeCollection:
    """In-memory stand-in for a motor collection."""

    def __init__(self, docs=None):
        self.docs = list(docs or [])
        self.insert_calls = 0
        self.fail_inserts_after = None  # number of successful inserts before failing
        self.fail_reads = False

    async def insert_one(self, doc):
        self.insert_calls += 1
        if self.fail_inserts_after is not None and len(self.docs) >= self.fail_inserts_after:
            raise ServerSelectionTimeoutError("store unavailable")
        doc = dict(doc, _id=ObjectId())
        self.docs.append(doc)
        return doc["_id"]

    def find(self, query):
        if self.fail_reads:
            raise ServerSelectionTimeoutError("store unavailable")
        return FakeCursor([d for d in self.docs if _matches(d, query)])

    async def find_one(self, query):
        if self.fail_reads:
            raise ServerSelectionTimeoutError("store unavailable")
        for d in self.docs:
            if _matches(d, query):
                return dict(d)
        return None


def _matches(doc, query):
    return all(doc.get(k) == v for k, v in query.items())


class FakeWebhook:
    """Records every forward; answers with `body` or raises `error`."""

    def __init__(self, store=None, body=None, error=None):
        self.store = store
        self.body = body
        self.error = error
        self.calls = []
        self.rows_at_call = []

    def forward(self, payload):
        self.calls.append(payload)
        if self.store is not None:
            self.rows_at_call.append(len(self.store.docs))
        if self.error is not None:
            raise self.error
        return self.body


@pytest.fixture
def store():
    return FakeCollection()


@pytest.fixture
def webhook(store):
    return FakeWebhook(store=store, body={"ok": True})


@pytest.fixture
def relay(store, webhook):
    return ChatRelay(store, webhook)


@pytest.fixture
def patients():
    return FakeCollection([
        {"_id": ObjectId(), "nomewpp": "Maria Silva", "telefone": "5511999999999", "created_at": "2025-03-01T12:00:00+00:00"},
    ])


@pytest.fixture
def client(relay, patients):
    app.dependency_overrides[get_chat_relay] = lambda: relay
    app.dependency_overrides[get_patients_collection] = lambda: patients
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def forward_error():
    return ForwardError("Webhook timed out after 2.0s")
