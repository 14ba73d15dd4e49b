"""Backend container: creation, startup probes and shutdown.

Every handle is created once per process and shared by all requests.
A handle that cannot be created is left as ``None``; requests that need
it fail at the point of use instead of at startup.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from starlette.concurrency import run_in_threadpool

from multikind_app.config import Settings, settings
from multikind_app.exceptions import StartupError
from multikind_app.protocols import CacheStore, DocumentStore, HttpProbe, RelationalStore
from multikind_app.repositories import (
    HttpxProbeRepository,
    MongoDocumentRepository,
    RedisCacheRepository,
    SqlRelationalRepository,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Backends:
    """Handles for every backend kind, in fan-out order."""

    cache: CacheStore | None = None
    documents: DocumentStore | None = None
    postgres: RelationalStore | None = None
    mysql: RelationalStore | None = None
    http: HttpProbe | None = None


def _open(name: str, factory: Callable[[], T]) -> T | None:
    try:
        return factory()
    except Exception as e:
        logger.warning("%s open error: %s", name, e)
        return None


def build_backends(config: Settings = settings) -> Backends:
    """Create every backend handle from settings.

    No network I/O happens here: the drivers connect lazily.
    """
    return Backends(
        cache=_open("redis", lambda: RedisCacheRepository.create(config)),
        documents=_open("mongo", lambda: MongoDocumentRepository.create(config)),
        postgres=_open("postgres", lambda: SqlRelationalRepository.create_postgres(config)),
        mysql=_open("mysql", lambda: SqlRelationalRepository.create_mysql(config)),
        http=_open("http", lambda: HttpxProbeRepository.create(config)),
    )


async def probe_backends(backends: Backends, mongo_required: bool = False) -> dict[str, bool]:
    """Ping each storage backend once and log the outcome.

    Relational schemas are created only after a successful ping.

    Args:
        backends: The container to probe.
        mongo_required: Treat an unreachable document store as fatal.

    Returns:
        Reachability per backend name

    Raises:
        StartupError: If ``mongo_required`` and MongoDB is unreachable
    """
    status: dict[str, bool] = {}

    status["redis"] = await _ping("Redis", backends.cache)
    status["mongo"] = await _ping("Mongo", backends.documents)
    if mongo_required and not status["mongo"]:
        raise StartupError("MongoDB is required but not reachable")

    for name, store in (("Postgres", backends.postgres), ("MySQL", backends.mysql)):
        reachable = await _ping(name, store)
        if reachable and store is not None:
            try:
                await run_in_threadpool(store.ensure_schema)
            except Exception as e:
                logger.warning("%s schema setup failed: %s", name, e)
        status[name.lower()] = reachable

    return status


async def _ping(name: str, store: CacheStore | DocumentStore | RelationalStore | None) -> bool:
    if store is None:
        logger.warning("%s not configured", name)
        return False
    reachable = await run_in_threadpool(store.ping)
    if reachable:
        logger.info("%s connected", name)
    else:
        logger.warning("%s not reachable", name)
    return reachable


async def close_backends(backends: Backends) -> None:
    """Release every handle; errors are logged so shutdown always completes."""
    for name, store in (
        ("redis", backends.cache),
        ("mongo", backends.documents),
        ("postgres", backends.postgres),
        ("mysql", backends.mysql),
    ):
        if store is None:
            continue
        try:
            await run_in_threadpool(store.close)
        except Exception as e:
            logger.warning("closing %s failed: %s", name, e)

    if backends.http is not None:
        await backends.http.close()
