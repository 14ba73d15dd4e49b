"""Protocol interfaces, one per backend kind.

Protocols use structural typing, so repositories and test doubles satisfy
them without inheriting from anything.

Usage:
    ```python
    from multikind_app.protocols import CacheStore

    cache: CacheStore = RedisCacheRepository.create()
    ```
"""

from .cache_store import CacheStore
from .document_store import DocumentStore
from .http_probe import HttpProbe
from .relational_store import RelationalStore

__all__ = [
    "CacheStore",
    "DocumentStore",
    "RelationalStore",
    "HttpProbe",
]
