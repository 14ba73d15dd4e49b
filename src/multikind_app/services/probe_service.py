"""Probe service: write-then-read-back against each backend kind.

Single-kind probes raise ``BackendError`` on the first failure. The
aggregate ``fan_out`` runs several probes in a fixed order and records a
failing backend under ``<backend>_error`` while the rest still run.
"""

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from starlette.concurrency import run_in_threadpool

from multikind_app.backends import Backends
from multikind_app.config import settings
from multikind_app.entities import ProbeResult
from multikind_app.exceptions import BackendError, BackendUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Fan-out order: cache, document store, relational A, relational B, outbound call
BACKEND_ORDER = ("redis", "mongo", "postgres", "mysql", "http")


@dataclass(frozen=True)
class Combo:
    """A named subset of backends probed by one aggregate endpoint.

    Attributes:
        tag: Short name used for the cache key and default value
        backends: Backend names, always a subsequence of BACKEND_ORDER
    """

    tag: str
    backends: tuple[str, ...]

    @property
    def cache_key(self) -> str:
        return f"{self.tag}-key"

    @property
    def default_value(self) -> str:
        return f"{self.tag}-item"


COMBOS: dict[str, Combo] = {
    "redis-mongo": Combo("multi", ("redis", "mongo")),
    "triple": Combo("triple", ("redis", "mongo", "postgres")),
    "all-dbs": Combo("all", ("redis", "mongo", "postgres", "mysql")),
    "kitchen-sink": Combo("sink", BACKEND_ORDER),
}


class ProbeService:
    """Runs the write-then-read-back probes.

    Blocking drivers run in the threadpool; the outbound call is awaited
    on the event loop.

    Example:
        ```python
        service = ProbeService(backends=build_backends())
        result = await service.probe("redis", "hello")
        aggregate = await service.fan_out(COMBOS["all-dbs"], "hello")
        ```
    """

    def __init__(self, backends: Backends, cache_ttl: int | None = None) -> None:
        """Initialize the probe service.

        Args:
            backends: Backend handles (required).
            cache_ttl: Expiry for probe keys in seconds. Defaults to settings.
        """
        self._backends = backends
        self._cache_ttl = cache_ttl or settings.cache_ttl
        self._probes: dict[str, Callable[[str], Awaitable[ProbeResult]]] = {
            "redis": self.probe_redis,
            "mongo": self.probe_mongo,
            "postgres": self.probe_postgres,
            "mysql": self.probe_mysql,
            "http": self.probe_http,
        }

    async def probe(self, backend: str, val: str) -> ProbeResult:
        """Run the probe for one backend by name.

        Raises:
            KeyError: If the backend name is unknown
            BackendError: If the backend call fails
        """
        return await self._probes[backend](val)

    async def probe_redis(self, val: str, key: str | None = None) -> ProbeResult:
        cache = self._require("redis", self._backends.cache)
        key = key or f"probe-{time.time_ns()}"

        await self._call("redis", cache.set, key, val, self._cache_ttl)
        stored = await self._call("redis", cache.get, key)
        if stored is None:
            raise BackendError("redis", f"key {key} missing after write")

        return ProbeResult(source="redis", value=stored, fields={"key": key, "value": stored})

    async def probe_mongo(self, val: str) -> ProbeResult:
        documents = self._require("mongo", self._backends.documents)
        document = await self._call("mongo", documents.insert_probe, val)
        return ProbeResult(source="mongo", value=document, fields={"document": document})

    async def probe_postgres(self, val: str) -> ProbeResult:
        store = self._require("postgres", self._backends.postgres)
        row = await self._call("postgres", store.insert_and_fetch_last, val)
        return ProbeResult(source="postgres", value=row.name, fields={"id": row.id, "name": row.name})

    async def probe_mysql(self, val: str) -> ProbeResult:
        store = self._require("mysql", self._backends.mysql)
        row = await self._call("mysql", store.insert_and_fetch_last, val)
        return ProbeResult(source="mysql", value=row.name, fields={"id": row.id, "name": row.name})

    async def probe_http(self, val: str) -> ProbeResult:
        http = self._require("http", self._backends.http)
        try:
            result = await http.fetch(val)
        except Exception as e:
            raise BackendError("http", str(e) or type(e).__name__) from e
        return ProbeResult(
            source="http",
            value=result.status,
            fields={"status": result.status, "body_len": result.body_len},
        )

    async def fan_out(self, combo: Combo, val: str | None = None) -> dict[str, Any]:
        """Probe every backend of a combo sequentially, tolerating failures.

        Args:
            combo: Which backends to probe
            val: Value to write. Defaults to the combo's default value.

        Returns:
            Read-back value per backend name, or ``<backend>_error`` for
            backends that failed
        """
        val = val or combo.default_value
        results: dict[str, Any] = {}

        for backend in combo.backends:
            try:
                if backend == "redis":
                    result = await self.probe_redis(val, key=combo.cache_key)
                else:
                    result = await self.probe(backend, val)
            except BackendError as e:
                logger.warning("%s: %s failed: %s", combo.tag, backend, e)
                results[f"{backend}_error"] = str(e)
                continue
            results[backend] = result.value

        return results

    @staticmethod
    def _require(backend: str, handle: T | None) -> T:
        if handle is None:
            raise BackendUnavailableError(backend)
        return handle

    @staticmethod
    async def _call(backend: str, func: Callable[..., T], *args: Any) -> T:
        """Run a blocking driver call in the threadpool.

        Raises:
            BackendError: Wrapping whatever the driver raised
        """
        try:
            return await run_in_threadpool(func, *args)
        except Exception as e:
            raise BackendError(backend, str(e) or type(e).__name__) from e
