"""
Tests for the multi-kind-app HTTP API.
"""

import pytest
from conftest import InMemoryCache, UnreachableBackend, UnreachableHttpProbe
from fastapi.testclient import TestClient

from multikind_app.api import dependencies
from multikind_app.api.app import create_app
from multikind_app.backends import Backends
from multikind_app.config import Settings
from multikind_app.entities import ItemEntity
from multikind_app.exceptions import StartupError


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "multi-kind-app"
    assert "/all-dbs" in data["endpoints"]["aggregate"]


def test_healthz(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_healthz_ignores_backends(make_client):
    """Health stays green with every backend down or missing."""
    client = make_client(
        Backends(
            cache=UnreachableBackend("redis"),
            documents=UnreachableBackend("mongo"),
            postgres=None,
            mysql=None,
            http=UnreachableHttpProbe(),
        )
    )
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_unknown_route_uses_error_body(client):
    response = client.get("/does/not/exist")
    assert response.status_code == 404
    assert "error" in response.json()


# Single-kind endpoints


def test_redis_probe_reads_back_value(client, backends):
    response = client.get("/redis/hello")
    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "redis"
    assert data["value"] == "hello"
    assert data["key"].startswith("probe-")
    assert backends.cache.ttls[data["key"]] == 60


def test_redis_probe_repeated_calls_use_fresh_keys(client):
    first = client.get("/redis/again").json()
    second = client.get("/redis/again").json()
    assert first["value"] == second["value"] == "again"
    assert first["key"] != second["key"]


def test_mongo_probe_returns_document(client):
    response = client.get("/mongo/doc-value")
    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "mongo"
    assert data["document"]["name"] == "doc-value"
    assert data["document"]["_id"]


def test_postgres_probe_returns_last_row(client):
    client.get("/postgres/first")
    response = client.get("/postgres/second")
    assert response.status_code == 200
    assert response.json() == {"source": "postgres", "id": 2, "name": "second"}


def test_mysql_probe_returns_last_row(client):
    response = client.get("/mysql/row")
    assert response.status_code == 200
    assert response.json() == {"source": "mysql", "id": 1, "name": "row"}


def test_http_probe(client, backends):
    response = client.get("/http/abc")
    assert response.status_code == 200
    assert response.json() == {"source": "http", "status": 200, "body_len": 3}
    assert backends.http.calls == ["abc"]


def test_single_kind_fails_fast(make_client, backends):
    backends.postgres = UnreachableBackend("postgres")
    client = make_client(backends)

    response = client.get("/postgres/x")
    assert response.status_code == 500
    assert response.json() == {"error": "postgres: connection refused"}


def test_single_kind_unconfigured_backend(make_client, backends):
    backends.mysql = None
    client = make_client(backends)

    response = client.get("/mysql/x")
    assert response.status_code == 500
    assert response.json() == {"error": "mysql backend is not configured"}


def test_http_probe_transport_error(make_client, backends):
    backends.http = UnreachableHttpProbe()
    client = make_client(backends)

    response = client.get("/http/x")
    assert response.status_code == 500
    assert response.json() == {"error": "name resolution failed"}


def test_legacy_endpoints_use_fixed_values(client):
    assert client.get("/redis-only").json()["value"] == "hello-redis"
    assert client.get("/mongo-only").json()["document"]["name"] == "test-item"
    assert client.get("/postgres-only").json()["name"] == "pg-item"
    assert client.get("/mysql-only").json()["name"] == "mysql-item"
    assert client.get("/http-only").json()["source"] == "http"


# Aggregate endpoints


def test_redis_mongo(client, backends):
    response = client.get("/redis-mongo")
    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"redis", "mongo"}
    assert data["redis"] == "multi-item"
    assert data["mongo"]["name"] == "multi-item"
    assert "multi-key" in backends.cache.data


def test_triple_with_value(client):
    data = client.get("/triple", params={"val": "custom"}).json()
    assert data["redis"] == "custom"
    assert data["mongo"]["name"] == "custom"
    assert data["postgres"] == "custom"
    assert "mysql" not in data


def test_all_dbs(client):
    response = client.get("/all-dbs")
    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"redis", "mongo", "postgres", "mysql"}
    assert data["mysql"] == "all-item"


def test_all_dbs_partial_failure(make_client, backends):
    """One unreachable backend is reported inline; siblings still run."""
    backends.mysql = UnreachableBackend("mysql")
    client = make_client(backends)

    response = client.get("/all-dbs")
    assert response.status_code == 200
    data = response.json()
    assert data["mysql_error"] == "mysql: connection refused"
    assert "mysql" not in data
    assert [key for key in data if key.endswith("_error")] == ["mysql_error"]
    assert data["redis"] == "all-item"
    assert data["mongo"]["name"] == "all-item"
    assert data["postgres"] == "all-item"


def test_all_dbs_first_backend_failure_does_not_abort(make_client, backends):
    backends.cache = UnreachableBackend("redis")
    client = make_client(backends)

    data = client.get("/all-dbs").json()
    assert "redis_error" in data
    assert data["postgres"] == "all-item"
    assert data["mysql"] == "all-item"


def test_kitchen_sink(client, backends):
    response = client.get("/kitchen-sink")
    assert response.status_code == 200
    data = response.json()
    assert list(data) == ["redis", "mongo", "postgres", "mysql", "http"]
    assert data["http"] == 200
    assert backends.http.calls == ["sink-item"]


def test_kitchen_sink_everything_down(make_client):
    client = make_client(
        Backends(
            cache=UnreachableBackend("redis"),
            documents=UnreachableBackend("mongo"),
            postgres=UnreachableBackend("postgres"),
            mysql=None,
            http=UnreachableHttpProbe(),
        )
    )

    response = client.get("/kitchen-sink")
    assert response.status_code == 200
    assert set(response.json()) == {
        "redis_error",
        "mongo_error",
        "postgres_error",
        "mysql_error",
        "http_error",
    }


# Item API


def test_create_then_get_item(client, backends):
    response = client.post("/api/item", json={"id": "42", "name": "answer", "value": "v-42"})
    assert response.status_code == 200
    assert response.json() == {"status": "created", "id": "42"}
    assert backends.cache.ttls["item:42"] == 600

    response = client.get("/api/item/42")
    assert response.status_code == 200
    assert response.json() == {
        "item": {"id": "42", "name": "answer", "value": "v-42"},
        "redis_cached": "v-42",
    }


def test_create_item_is_an_upsert(client):
    client.post("/api/item", json={"id": "7", "name": "old", "value": "a"})
    client.post("/api/item", json={"id": "7", "name": "new", "value": "b"})

    data = client.get("/api/item/7").json()
    assert data["item"]["name"] == "new"
    assert data["redis_cached"] == "b"


def test_get_missing_item(client):
    response = client.get("/api/item/never-created")
    assert response.status_code == 404
    assert "error" in response.json()


def test_create_item_missing_id(client):
    response = client.post("/api/item", json={"name": "x", "value": "y"})
    assert response.status_code == 400
    assert "id" in response.json()["error"]


def test_create_item_invalid_json(client):
    response = client.post(
        "/api/item",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert "error" in response.json()


def test_create_item_document_store_failure(make_client, backends):
    backends.documents = UnreachableBackend("mongo")
    client = make_client(backends)

    response = client.post("/api/item", json={"id": "1", "name": "n", "value": "v"})
    assert response.status_code == 500
    assert "upsert failed" in response.json()["error"]
    assert backends.cache.data == {}


def test_create_item_cache_failure(make_client, backends):
    backends.cache = UnreachableBackend("redis")
    client = make_client(backends)

    response = client.post("/api/item", json={"id": "1", "name": "n", "value": "v"})
    assert response.status_code == 500
    assert "cache write failed" in response.json()["error"]


def test_get_item_cache_failure_is_best_effort(make_client, backends):
    backends.documents.upsert_item(ItemEntity(id="9", name="n", value="v"))
    backends.cache = UnreachableBackend("redis")
    client = make_client(backends)

    response = client.get("/api/item/9")
    assert response.status_code == 200
    assert response.json()["redis_cached"] is None


def test_get_item_cache_miss(client, backends):
    backends.documents.upsert_item(ItemEntity(id="5", name="n", value="v"))

    response = client.get("/api/item/5")
    assert response.status_code == 200
    assert response.json()["redis_cached"] is None


def test_create_then_get_item_with_slash_in_id(client):
    response = client.post("/api/item", json={"id": "team/7", "name": "n", "value": "v"})
    assert response.status_code == 200

    response = client.get("/api/item/team/7")
    assert response.status_code == 200
    assert response.json() == {
        "item": {"id": "team/7", "name": "n", "value": "v"},
        "redis_cached": "v",
    }


# Startup


class ClosingUnreachableBackend(UnreachableBackend):
    def __init__(self, label: str) -> None:
        super().__init__(label)
        self.closed = False

    def close(self) -> None:
        self.closed = True


def test_startup_fails_when_required_mongo_is_down():
    app = create_app(
        backends=Backends(cache=InMemoryCache(), documents=UnreachableBackend("mongo")),
        config=Settings(mongo_required=True),
    )

    with pytest.raises(StartupError):
        with TestClient(app):
            pass


def test_startup_failure_closes_backends_it_built(monkeypatch):
    documents = ClosingUnreachableBackend("mongo")
    monkeypatch.setattr(
        dependencies,
        "build_backends",
        lambda config: Backends(cache=InMemoryCache(), documents=documents),
    )
    app = create_app(config=Settings(mongo_required=True))

    with pytest.raises(StartupError):
        with TestClient(app):
            pass
    assert documents.closed


def test_startup_leaves_handed_in_backends_open():
    documents = ClosingUnreachableBackend("mongo")
    app = create_app(
        backends=Backends(cache=InMemoryCache(), documents=documents),
        config=Settings(mongo_required=True),
    )

    with pytest.raises(StartupError):
        with TestClient(app):
            pass
    assert not documents.closed
