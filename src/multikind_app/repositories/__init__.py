"""Repository layer for data access.

Each repository wraps one driver (redis-py, pymongo, SQLAlchemy, httpx)
behind the matching protocol from ``multikind_app.protocols``. Driver
exceptions are not translated here; the service layer decides whether a
failure aborts the request or is recorded next to the other results.
"""

from multikind_app.protocols import CacheStore, DocumentStore, HttpProbe, RelationalStore

from .http_repository import HttpxProbeRepository
from .mongo_repository import MongoDocumentRepository
from .redis_repository import RedisCacheRepository
from .sql_repository import SqlRelationalRepository, items_table

__all__ = [
    "CacheStore",
    "DocumentStore",
    "RelationalStore",
    "HttpProbe",
    "RedisCacheRepository",
    "MongoDocumentRepository",
    "SqlRelationalRepository",
    "HttpxProbeRepository",
    "items_table",
]
