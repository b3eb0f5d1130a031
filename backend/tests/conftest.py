"""
NutriTrack Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (in-memory Firestore, wired
       services, API client) so no test needs credentials or a network.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── fake_store: In-memory stand-in for firestore.AsyncClient
    ├── document_service: DocumentService over fake_store
    ├── user_service / search_history_service / consumption_history_service
    └── test_client: HTTPX AsyncClient for API endpoint testing

The fake implements only the client surface DocumentService touches:
collection(path).document(id).get/set/update/delete, collection.add, and
queries built from order_by / where(filter=FieldFilter) / start_after / limit.
"""

import copy
import os
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings for testing BEFORE any app imports
# Why: Prevents tests from picking up a real key file or production mode
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests
os.environ["FIREBASE_CREDENTIALS_PATH"] = "/nonexistent/firebase-key.json"

from google.api_core.exceptions import NotFound  # noqa: E402

from nutritrack.services.document_service import DocumentService  # noqa: E402
from nutritrack.services.history_service import (  # noqa: E402
    ConsumptionHistoryService,
    SearchHistoryService,
)
from nutritrack.services.user_service import UserService  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# In-memory Firestore
# ══════════════════════════════════════════════════════════════════════════

class FakeSnapshot:
    def __init__(self, doc_id: str, data: Optional[Dict[str, Any]]):
        self.id = doc_id
        self._data = data
        self.exists = data is not None

    def to_dict(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentReference:
    def __init__(self, store: "FakeFirestore", collection_path: str, doc_id: str):
        self._store = store
        self._key = (collection_path, doc_id)
        self.id = doc_id

    async def get(self) -> FakeSnapshot:
        return FakeSnapshot(self.id, self._store.documents.get(self._key))

    async def set(self, data: Dict[str, Any]) -> None:
        self._store.writes.append(("set", self._key))
        self._store.documents[self._key] = copy.deepcopy(data)

    async def update(self, data: Dict[str, Any]) -> None:
        if self._key not in self._store.documents:
            raise NotFound(f"No document to update: {'/'.join(self._key)}")
        self._store.writes.append(("update", self._key))
        self._store.documents[self._key].update(copy.deepcopy(data))

    async def delete(self) -> None:
        self._store.writes.append(("delete", self._key))
        self._store.documents.pop(self._key, None)


class FakeQuery:
    """Immutable query builder; each call returns a narrowed copy."""

    def __init__(
        self,
        store: "FakeFirestore",
        collection_path: str,
        orders: Tuple[Tuple[str, str], ...] = (),
        filters: Tuple[Tuple[str, str, Any], ...] = (),
        cursor: Optional[Dict[str, Any]] = None,
        limit_count: Optional[int] = None,
    ):
        self._store = store
        self._path = collection_path
        self._orders = orders
        self._filters = filters
        self._cursor = cursor
        self._limit = limit_count

    def _copy(self, **changes) -> "FakeQuery":
        state = {
            "orders": self._orders,
            "filters": self._filters,
            "cursor": self._cursor,
            "limit_count": self._limit,
        }
        state.update(changes)
        return FakeQuery(self._store, self._path, **state)

    def order_by(self, field: str, direction: str = "ASCENDING") -> "FakeQuery":
        return self._copy(orders=self._orders + ((field, direction),))

    def where(self, filter=None) -> "FakeQuery":
        condition = (filter.field_path, filter.op_string, filter.value)
        return self._copy(filters=self._filters + (condition,))

    def start_after(self, values: Dict[str, Any]) -> "FakeQuery":
        return self._copy(cursor=dict(values))

    def limit(self, count: int) -> "FakeQuery":
        return self._copy(limit_count=count)

    async def get(self) -> List[FakeSnapshot]:
        if self._store.fail_with is not None:
            raise self._store.fail_with

        rows = [
            (doc_id, data)
            for (path, doc_id), data in self._store.documents.items()
            if path == self._path
        ]

        for field, op, value in self._filters:
            rows = [
                row for row in rows
                if field in row[1] and _compare(row[1][field], op, value)
            ]

        # Firestore leaves out documents that lack an order_by field
        for field, direction in reversed(self._orders):
            rows = [row for row in rows if field in row[1]]
            rows.sort(key=lambda row: row[1][field], reverse=direction == "DESCENDING")

        if self._cursor and self._orders:
            field, direction = self._orders[0]
            bound = self._cursor[field]
            if direction == "DESCENDING":
                rows = [row for row in rows if row[1][field] < bound]
            else:
                rows = [row for row in rows if row[1][field] > bound]

        if self._limit is not None:
            rows = rows[: self._limit]

        return [FakeSnapshot(doc_id, copy.deepcopy(data)) for doc_id, data in rows]


def _compare(left: Any, op: str, right: Any) -> bool:
    return {
        "<": left < right,
        "<=": left <= right,
        "==": left == right,
        ">=": left >= right,
        ">": left > right,
    }[op]


class FakeCollectionReference(FakeQuery):
    def __init__(self, store: "FakeFirestore", collection_path: str):
        super().__init__(store, collection_path)

    def document(self, doc_id: str) -> FakeDocumentReference:
        return FakeDocumentReference(self._store, self._path, doc_id)

    async def add(self, data: Dict[str, Any]):
        doc_ref = self.document(uuid.uuid4().hex[:20])
        await doc_ref.set(data)
        return datetime.now(timezone.utc), doc_ref


class FakeFirestore:
    """
    Dict-backed stand-in for firestore.AsyncClient.

    Attributes:
        documents: {(collection_path, doc_id): fields}
        writes:    every set/update/delete issued, in order
        fail_with: when set, every query raises it (store outage)
    """

    def __init__(self):
        self.documents: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self.writes: List[Tuple[str, Tuple[str, str]]] = []
        self.fail_with: Optional[Exception] = None
        self.closed = False

    def collection(self, path: str) -> FakeCollectionReference:
        return FakeCollectionReference(self, path)

    def seed(self, collection_path: str, doc_id: str, data: Dict[str, Any]) -> None:
        self.documents[(collection_path, doc_id)] = copy.deepcopy(data)

    def close(self) -> None:
        self.closed = True


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def fake_store():
    """An empty in-memory Firestore."""
    return FakeFirestore()


@pytest.fixture
def document_service(fake_store):
    return DocumentService(fake_store)


@pytest.fixture
def user_service(document_service):
    return UserService(document_service)


@pytest.fixture
def search_history_service(document_service):
    return SearchHistoryService(document_service)


@pytest.fixture
def consumption_history_service(document_service):
    return ConsumptionHistoryService(document_service)


@pytest.fixture
def app(fake_store):
    """A fresh application wired to the in-memory store."""
    from nutritrack.main import create_app

    return create_app(store_client=fake_store)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Provides an async HTTP test client for endpoint testing.

    What:    HTTPX AsyncClient configured to talk to the FastAPI app.
    How:     ASGITransport routes requests directly to the app. Unhandled
             exceptions are turned into 500 responses by the app's handler
             instead of being re-raised into the test.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
