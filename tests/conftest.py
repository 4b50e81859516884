"""Shared fixtures: swap Firestore for an in-memory document store."""
from __future__ import annotations

import threading
import uuid
from typing import Any, Dict, List, Optional

import pytest


# ---------- In-memory document store ----------

class FakeDB:
    """A set of named collections plus a log of every write and injected failures."""

    def __init__(self):
        self.data: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.writes: List[tuple] = []
        self._failures: Dict[tuple, Exception] = {}
        self.lock = threading.Lock()

    def collection(self, name: str) -> "FakeStore":
        return FakeStore(self, name)

    def fail(self, name: str, op: str, exc: Optional[Exception] = None) -> None:
        """Make ``op`` on collection ``name`` raise from now on."""
        self._failures[(name, op)] = exc or RuntimeError(f"{name}.{op} unavailable")

    def check(self, name: str, op: str) -> None:
        exc = self._failures.get((name, op))
        if exc is not None:
            raise exc

    def seed(self, collection_name: str, doc_id: str, /, **fields: Any) -> None:
        self.data.setdefault(collection_name, {})[doc_id] = dict(fields)

    def docs(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self.data.get(name, {})


class FakeStore:
    """Same surface as ``storefront.services.store.DocumentStore``."""

    def __init__(self, db: FakeDB, name: str):
        self._db = db
        self.name = name

    @property
    def _docs(self) -> Dict[str, Dict[str, Any]]:
        return self._db.data.setdefault(self.name, {})

    def _matches(self, equals: Dict[str, Any]):
        return [
            doc_id for doc_id, doc in self._docs.items()
            if all(doc.get(k) == v for k, v in equals.items())
        ]

    def insert_one(self, document: Dict[str, Any]) -> str:
        self._db.check(self.name, "insert_one")
        doc_id = uuid.uuid4().hex[:20]
        with self._db.lock:
            self._docs[doc_id] = dict(document)
            self._db.writes.append((self.name, "insert_one", doc_id))
        return doc_id

    def increment(self, doc_id: str, field: str, delta: float) -> bool:
        self._db.check(self.name, "increment")
        with self._db.lock:
            self._db.writes.append((self.name, "increment", doc_id))
            doc = self._docs.get(doc_id)
            if doc is None:
                return False
            doc[field] = (doc.get(field) or 0) + delta
        return True

    def take(self, doc_id: str, field: str, amount: float) -> bool:
        self._db.check(self.name, "take")
        with self._db.lock:
            doc = self._docs.get(doc_id)
            if doc is None or (doc.get(field) or 0) < amount:
                return False
            doc[field] = doc[field] - amount
            self._db.writes.append((self.name, "take", doc_id))
        return True

    def delete_one(self, doc_id: str) -> None:
        self._db.check(self.name, "delete_one")
        with self._db.lock:
            self._docs.pop(doc_id, None)
            self._db.writes.append((self.name, "delete_one", doc_id))

    def delete_many(self, **equals: Any) -> int:
        self._db.check(self.name, "delete_many")
        with self._db.lock:
            ids = self._matches(equals)
            for i in ids:
                del self._docs[i]
            self._db.writes.append((self.name, "delete_many", tuple(ids)))
        return len(ids)


# ---------- Fixtures ----------

@pytest.fixture()
def db(monkeypatch):
    """Fresh in-memory store wired into the order service, floor check off."""
    fake = FakeDB()
    monkeypatch.setattr("storefront.services.orders.collection", fake.collection)
    monkeypatch.setattr("storefront.services.orders.settings.enforce_stock_floor", False)
    return fake


@pytest.fixture()
def guarded(db, monkeypatch):
    """Same store with the stock-floor check switched on."""
    monkeypatch.setattr("storefront.services.orders.settings.enforce_stock_floor", True)
    return db


@pytest.fixture()
def client():
    """FastAPI TestClient (sync)."""
    from fastapi.testclient import TestClient
    from storefront.main import app
    return TestClient(app)


def order_payload(email: str = "buyer@example.com", cart=None, **overrides) -> Dict[str, Any]:
    body = {
        "userEmail": email,
        "cart": cart if cart is not None else [
            {"_id": "productA", "name": "Desk Lamp", "price": 20.0, "quantity": 2},
            {"_id": "productB", "name": "Notebook", "price": 5.0, "quantity": 1},
        ],
        "subtotal": 45.0,
        "shippingCost": 5.0,
        "total": 50.0,
        "billingInfo": {"name": "Ada", "address": "1 Main St"},
        "shippingInfo": {"method": "standard"},
        "paymentInfo": {"method": "card", "last4": "4242"},
    }
    body.update(overrides)
    return body
