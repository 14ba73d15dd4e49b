"""Item service: document store with write-through to the cache."""

import logging

from starlette.concurrency import run_in_threadpool

from multikind_app.config import settings
from multikind_app.entities import ItemEntity
from multikind_app.entities.item import item_cache_key
from multikind_app.exceptions import BackendError, BackendUnavailableError, ItemNotFoundError
from multikind_app.protocols import CacheStore, DocumentStore

logger = logging.getLogger(__name__)


class ItemService:
    """Create and look up items.

    Writes go to the document store first and then to the cache; there is
    no rollback, so a cache failure after a successful upsert leaves the
    two stores out of step until the next create.
    """

    def __init__(
        self,
        documents: DocumentStore | None,
        cache: CacheStore | None,
        item_ttl: int | None = None,
    ) -> None:
        """Initialize the item service.

        Args:
            documents: Document store holding the items.
            cache: Cache receiving the write-through copy of ``value``.
            item_ttl: Expiry of the cached copy in seconds. Defaults to settings.
        """
        self._documents = documents
        self._cache = cache
        self._item_ttl = item_ttl or settings.item_cache_ttl

    async def create_item(self, item: ItemEntity) -> ItemEntity:
        """Upsert an item and write its value through to the cache.

        Raises:
            BackendError: If either write fails
        """
        if self._documents is None:
            raise BackendUnavailableError("mongo")
        if self._cache is None:
            raise BackendUnavailableError("redis")

        try:
            await run_in_threadpool(self._documents.upsert_item, item)
        except Exception as e:
            raise BackendError("mongo", f"upsert failed: {e}") from e

        try:
            await run_in_threadpool(self._cache.set, item.cache_key, item.value, self._item_ttl)
        except Exception as e:
            raise BackendError("redis", f"cache write failed: {e}") from e

        logger.info("created item %s", item.id)
        return item

    async def get_item(self, item_id: str) -> tuple[ItemEntity, str | None]:
        """Read an item and, best-effort, its cached value.

        Returns:
            The item and the cached value (None on a miss or cache failure)

        Raises:
            ItemNotFoundError: If no document has this id
            BackendError: If the document store call fails
        """
        if self._documents is None:
            raise BackendUnavailableError("mongo")

        try:
            item = await run_in_threadpool(self._documents.find_item, item_id)
        except Exception as e:
            raise BackendError("mongo", f"lookup failed: {e}") from e
        if item is None:
            raise ItemNotFoundError(item_id)

        return item, await self._cached_value(item_id)

    async def _cached_value(self, item_id: str) -> str | None:
        if self._cache is None:
            return None
        try:
            return await run_in_threadpool(self._cache.get, item_cache_key(item_id))
        except Exception as e:
            logger.warning("cache read for item %s failed: %s", item_id, e)
            return None
