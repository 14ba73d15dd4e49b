"""MongoDB implementation of DocumentStore."""

import logging
import time
from typing import Any

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from multikind_app.config import Settings, get_mongo_client, settings
from multikind_app.entities import ItemEntity

logger = logging.getLogger(__name__)


def _jsonable(document: dict[str, Any]) -> dict[str, Any]:
    """Render ObjectId (and any other non-JSON id) as a string."""
    result = dict(document)
    if "_id" in result:
        result["_id"] = str(result["_id"])
    return result


class MongoDocumentRepository:
    """Document store backed by a single MongoDB collection.

    Probe documents (``{name, ts}``) and items (``{id, name, value}``)
    share the collection; items are addressed by their ``id`` field.
    """

    def __init__(self, collection: Collection, client: MongoClient | None = None) -> None:
        """Initialize the repository.

        Args:
            collection: The collection to read and write.
            client: Owning client, closed by ``close()`` when given.
        """
        self._collection = collection
        self._client = client

    @classmethod
    def create(cls, config: Settings = settings) -> "MongoDocumentRepository":
        """Factory method to create MongoDocumentRepository from settings.

        Args:
            config: Settings holding ``MONGO_URI``, ``MONGO_DB`` and ``MONGO_COLLECTION``.

        Returns:
            Configured MongoDocumentRepository
        """
        client = get_mongo_client(config)
        collection = client[config.mongo_db][config.mongo_collection]
        return cls(collection=collection, client=client)

    def insert_probe(self, name: str) -> dict[str, Any]:
        inserted = self._collection.insert_one({"name": name, "ts": int(time.time())})
        document = self._collection.find_one({"_id": inserted.inserted_id})
        if document is None:
            raise LookupError(f"document {inserted.inserted_id} missing after insert")
        return _jsonable(document)

    def upsert_item(self, item: ItemEntity) -> None:
        self._collection.replace_one({"id": item.id}, item.to_dict(), upsert=True)

    def find_item(self, item_id: str) -> ItemEntity | None:
        document = self._collection.find_one({"id": item_id}, projection={"_id": False})
        if document is None:
            return None
        return ItemEntity(
            id=document["id"],
            name=document.get("name", ""),
            value=document.get("value", ""),
        )

    def ping(self) -> bool:
        """Check if MongoDB is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            self._collection.database.command("ping")
            return True
        except PyMongoError as e:
            logger.warning("Mongo ping failed: %s", e)
            return False

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
