"""
Shared fixtures for the multi-kind-app tests.

The storage protocols are structural, so plain in-memory classes stand in
for Redis and MongoDB. The relational stores are real
SqlRelationalRepository instances over in-memory SQLite.
"""

import itertools

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from multikind_app.api.app import create_app
from multikind_app.backends import Backends
from multikind_app.config import Settings
from multikind_app.entities import HttpResultEntity, ItemEntity
from multikind_app.repositories import SqlRelationalRepository


class InMemoryCache:
    """CacheStore double that remembers the TTL of every write."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    def set(self, key: str, value: str, ttl: int) -> None:
        self.data[key] = value
        self.ttls[key] = ttl

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        pass


class InMemoryDocuments:
    """DocumentStore double."""

    def __init__(self) -> None:
        self.probes: list[dict] = []
        self.items: dict[str, ItemEntity] = {}
        self._ids = itertools.count(1)

    def insert_probe(self, name: str) -> dict:
        document = {"_id": f"doc-{next(self._ids)}", "name": name, "ts": 1700000000}
        self.probes.append(document)
        return dict(document)

    def upsert_item(self, item: ItemEntity) -> None:
        self.items[item.id] = item

    def find_item(self, item_id: str) -> ItemEntity | None:
        return self.items.get(item_id)

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        pass


class FakeHttpProbe:
    def __init__(self, status: int = 200) -> None:
        self.status = status
        self.calls: list[str] = []

    async def fetch(self, val: str) -> HttpResultEntity:
        self.calls.append(val)
        return HttpResultEntity(status=self.status, body_len=len(val))

    async def close(self) -> None:
        pass


class UnreachableBackend:
    """Fails every call the way a backend with a refused connection does.

    Implements the union of the storage protocols so it can replace any
    of them.
    """

    def __init__(self, label: str) -> None:
        self._label = label

    @property
    def label(self) -> str:
        return self._label

    def _refuse(self, *args, **kwargs):
        raise ConnectionError(f"{self._label}: connection refused")

    set = get = insert_probe = upsert_item = find_item = _refuse
    insert_and_fetch_last = ensure_schema = _refuse

    def ping(self) -> bool:
        return False

    def close(self) -> None:
        pass


class UnreachableHttpProbe:
    async def fetch(self, val: str) -> HttpResultEntity:
        raise ConnectionError("name resolution failed")

    async def close(self) -> None:
        pass


def sqlite_store(label: str) -> SqlRelationalRepository:
    """A relational store over a private in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    return SqlRelationalRepository(engine=engine, label=label)


@pytest.fixture
def test_settings():
    return Settings(cache_ttl=60, item_cache_ttl=600, mongo_required=False)


@pytest.fixture
def backends():
    """All five backends healthy."""
    return Backends(
        cache=InMemoryCache(),
        documents=InMemoryDocuments(),
        postgres=sqlite_store("postgres"),
        mysql=sqlite_store("mysql"),
        http=FakeHttpProbe(),
    )


@pytest.fixture
def make_client(test_settings):
    """Build a TestClient around a given Backends container.

    The client is entered so the lifespan (probes, handler wiring) runs.
    """
    clients = []

    def _make(container: Backends) -> TestClient:
        client = TestClient(create_app(backends=container, config=test_settings))
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client, backends):
    """Create a test client with every backend healthy."""
    return make_client(backends)

