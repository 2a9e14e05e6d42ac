# tests/conftest.py
"""
Pytest configuration and fixtures for the Narrative Progress Engine test suite.

Provides:
- Supabase mock client for adapter tests
- In-memory repositories for service and API tests
- FastAPI test client
- Factories for common domain values

Note: Tests never reach a real Supabase project. Adapter tests hand the mock
client to the repository directly; everything else runs on the memory backend.
"""

import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Generator, List, Set, Tuple

import pytest
from fastapi.testclient import TestClient

# Set test environment before imports
os.environ["NARRATIVE_ENV"] = "test"
os.environ["NARRATIVE_BACKEND"] = "memory"

from narrative.config import initialize_config  # noqa: E402

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
initialize_config(str(CONFIG_DIR))

from narrative.core.models import (  # noqa: E402
    ContentKind,
    ShareableContent,
    VisibilityEdge,
)
from narrative.infrastructure.supabase_client import set_supabase_client  # noqa: E402
from narrative.repositories import (  # noqa: E402
    get_alignment_repository,
    get_content_repository,
    get_engagement_repository,
    get_marker_repository,
    get_visibility_repository,
    reset_memory_repositories,
    set_default_backend,
)


# ============== Supabase Mock Fixtures ==============

class MockSupabaseResponse:
    """Mock response from Supabase operations."""
    def __init__(self, data: List[Dict] = None, count: int = None, error: str = None):
        self.data = data or []
        self.count = count if count is not None else len(self.data)
        self.error = error


class MockSupabaseTable:
    """Mock Supabase table with chainable methods."""

    def __init__(self, table_name: str, client: "MockSupabaseClient"):
        self.table_name = table_name
        self._client = client
        self._data_store = client._data_store
        self._operation = "select"
        self._payload: List[Dict] = []
        self._on_conflict = "id"
        self._filters: List[Tuple[str, str, Any]] = []
        self._order_by = None
        self._limit = None
        self._select_cols = "*"

    def select(self, columns: str = "*"):
        self._operation = "select"
        self._select_cols = columns
        return self

    def insert(self, data: Dict | List[Dict]):
        self._operation = "insert"
        self._payload = [data] if isinstance(data, dict) else list(data)
        return self

    def upsert(self, data: Dict | List[Dict], on_conflict: str = "id"):
        self._operation = "upsert"
        self._payload = [data] if isinstance(data, dict) else list(data)
        self._on_conflict = on_conflict
        return self

    def update(self, data: Dict):
        self._operation = "update"
        self._payload = [data]
        return self

    def delete(self):
        self._operation = "delete"
        return self

    def eq(self, column: str, value: Any):
        self._filters.append(("eq", column, value))
        return self

    def neq(self, column: str, value: Any):
        self._filters.append(("neq", column, value))
        return self

    def in_(self, column: str, values: List[Any]):
        self._filters.append(("in", column, list(values)))
        return self

    def is_(self, column: str, value: Any):
        self._filters.append(("is", column, value))
        return self

    def order(self, column: str, desc: bool = False):
        self._order_by = (column, desc)
        return self

    def limit(self, count: int):
        self._limit = count
        return self

    def _matches(self, row: Dict) -> bool:
        for op, column, value in self._filters:
            actual = row.get(column)
            if op == "eq" and actual != value:
                return False
            if op == "neq" and actual == value:
                return False
            if op == "in" and actual not in value:
                return False
            if op == "is" and value == "null" and actual is not None:
                return False
        return True

    def execute(self) -> MockSupabaseResponse:
        """Execute the query and return results."""
        self._client.calls.append((self.table_name, self._operation, list(self._filters)))
        if self._client.should_fail(self.table_name, self._operation):
            raise RuntimeError(f"simulated {self._operation} failure on {self.table_name}")

        rows = self._data_store.setdefault(self.table_name, [])

        if self._operation == "insert":
            inserted = []
            for item in self._payload:
                item = dict(item)
                item.setdefault("id", str(uuid.uuid4()))
                item.setdefault("created_at", datetime.now(timezone.utc).isoformat())
                rows.append(item)
                inserted.append(item)
            return MockSupabaseResponse(data=inserted)

        if self._operation == "upsert":
            for item in self._payload:
                existing = next(
                    (r for r in rows if r.get(self._on_conflict) == item.get(self._on_conflict)),
                    None,
                )
                if existing is not None:
                    existing.update(item)
                else:
                    rows.append(dict(item))
            return MockSupabaseResponse(data=[dict(i) for i in self._payload])

        matched = [r for r in rows if self._matches(r)]

        if self._operation == "update":
            for row in matched:
                row.update(self._payload[0])
            return MockSupabaseResponse(data=[dict(r) for r in matched])

        if self._operation == "delete":
            self._data_store[self.table_name] = [r for r in rows if not self._matches(r)]
            return MockSupabaseResponse(data=matched)

        data = [dict(r) for r in matched]
        if self._order_by:
            column, desc = self._order_by
            data.sort(key=lambda r: str(r.get(column) or ""), reverse=desc)
        if self._limit:
            data = data[:self._limit]
        return MockSupabaseResponse(data=data)


class MockSupabaseClient:
    """Mock Supabase client for testing."""

    def __init__(self):
        self._data_store: Dict[str, List[Dict]] = {}
        self._failures: Set[Tuple[str, str]] = set()
        self.calls: List[Tuple[str, str, List]] = []

    def table(self, name: str) -> MockSupabaseTable:
        return MockSupabaseTable(name, self)

    def seed_data(self, table_name: str, data: List[Dict]):
        """Seed test data into a table."""
        self._data_store[table_name] = [dict(row) for row in data]

    def rows(self, table_name: str) -> List[Dict]:
        return self._data_store.get(table_name, [])

    def fail_on(self, table_name: str, operation: str = "*"):
        """Make every ``operation`` on ``table_name`` raise."""
        self._failures.add((table_name, operation))

    def should_fail(self, table_name: str, operation: str) -> bool:
        return (table_name, operation) in self._failures or (table_name, "*") in self._failures

    def clear(self):
        """Clear all test data."""
        self._data_store.clear()
        self._failures.clear()
        self.calls.clear()


@pytest.fixture(scope="function")
def mock_supabase() -> MockSupabaseClient:
    """
    Mock Supabase client for testing.

    Stores data in memory and supports select, insert, upsert, update and
    delete with eq / neq / in_ / is_ filters.
    """
    return MockSupabaseClient()


# ============== Repository Fixtures ==============

@pytest.fixture(autouse=True)
def memory_backend() -> Generator[None, None, None]:
    """Every test starts on a fresh memory backend with no Supabase client."""
    set_default_backend("memory")
    reset_memory_repositories()
    set_supabase_client(None)
    yield
    reset_memory_repositories()
    set_default_backend(None)
    set_supabase_client(None)


@pytest.fixture
def alignment_repo():
    return get_alignment_repository()


@pytest.fixture
def marker_repo():
    return get_marker_repository()


@pytest.fixture
def engagement_repo():
    return get_engagement_repository()


@pytest.fixture
def visibility_repo():
    return get_visibility_repository()


@pytest.fixture
def content_repo():
    return get_content_repository()


# ============== FastAPI Client Fixtures ==============

@pytest.fixture(scope="function")
def client() -> Generator[TestClient, None, None]:
    """FastAPI test client on the memory backend."""
    from narrative.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


# ============== Sample Data Factories ==============

def at(day: int, hour: int = 12) -> datetime:
    """A fixed UTC timestamp in January 2024."""
    return datetime(2024, 1, day, hour, tzinfo=timezone.utc)


@pytest.fixture
def edge_factory():
    """Factory for visibility edges."""
    def _create_edge(from_user: str, to_user: str, muted: bool = False, day: int = 1) -> VisibilityEdge:
        return VisibilityEdge(
            id=str(uuid.uuid4()),
            from_user=from_user,
            to_user=to_user,
            muted_at=at(day + 1) if muted else None,
            created_at=at(day),
        )
    return _create_edge


@pytest.fixture
def content_factory():
    """Factory for shareable content records."""
    def _create_content(
        author: str,
        kind: ContentKind = ContentKind.SHARE,
        day: int = 1,
        hour: int = 12,
        shareable: bool = True,
        item_id: str = None,
        recipient: str = None,
        text: str = "Test content",
    ) -> ShareableContent:
        return ShareableContent(
            id=item_id or str(uuid.uuid4()),
            kind=kind,
            author=author,
            created_at=at(day, hour),
            text=text,
            shareable=shareable,
            recipient=recipient,
        )
    return _create_content


# ============== Assertion Helpers ==============

@pytest.fixture
def assert_response_success():
    """Helper to assert successful API responses."""
    def _assert(response, status_code: int = 200):
        assert response.status_code == status_code, f"Expected {status_code}, got {response.status_code}: {response.text}"
        body = response.json()
        assert body["success"] is True
        return body["data"]
    return _assert


@pytest.fixture
def assert_response_error():
    """Helper to assert error API responses."""
    def _assert(response, status_code: int, code: str = None):
        assert response.status_code == status_code, f"Expected {status_code}, got {response.status_code}: {response.text}"
        body = response.json()
        assert body["success"] is False
        if code:
            assert body["error"]["code"] == code
        return body["error"]
    return _assert
